"""In-memory text document used to translate offsets into positions."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field

from projectlint.models.diagnostics import Position


@dataclass(frozen=True)
class TextDocument:
    """A file path plus the text currently shown for it."""

    path: str
    text: str
    _line_starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        starts = [0]
        for index, char in enumerate(self.text):
            if char == "\n":
                starts.append(index + 1)
        object.__setattr__(self, "_line_starts", tuple(starts))

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def pos_from_index(self, index: int) -> Position:
        """Convert a character offset into a zero-based line/ch position.

        Offsets outside the text are clamped to its start or end.
        """
        index = max(0, min(index, len(self.text)))
        line = bisect_right(self._line_starts, index) - 1
        return Position(line=line, ch=index - self._line_starts[line])
