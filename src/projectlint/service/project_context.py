"""Per-project lint configuration state.

A ``ProjectContext`` is created every time a project is opened and closed
when another project replaces it.  Reloads publish into the context only
while they hold its latest ``ReloadToken`` and the context is still open,
so a continuation that resolves after a project switch, or after a newer
reload of the same project started, leaves the published state alone.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

_context_ids = itertools.count(1)


@dataclass(frozen=True)
class ReloadToken:
    """Identifies one reload attempt of one project context."""

    context_id: int
    root: Path
    sequence: int


class ProjectContext:
    """Config, config error and generation of the currently open project."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self.context_id = next(_context_ids)
        self._config: MappingProxyType[str, Any] | None = None
        self._config_error: str | None = None
        self._generation = 0
        self._sequence = 0
        self._latest: ReloadToken | None = None
        self._closed = False

    # -- read side -----------------------------------------------------------

    @property
    def config(self) -> MappingProxyType[str, Any] | None:
        return self._config

    @property
    def config_error(self) -> str | None:
        return self._config_error

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    def snapshot_config(self) -> dict[str, Any] | None:
        """Return a plain-dict copy of the published config for a backend request."""
        return dict(self._config) if self._config is not None else None

    # -- reload protocol -----------------------------------------------------

    def begin_reload(self) -> ReloadToken:
        """Clear published state and hand out a token for a new reload attempt."""
        self._config = None
        self._config_error = None
        self._sequence += 1
        self._generation += 1
        self._latest = ReloadToken(self.context_id, self.root, self._sequence)
        return self._latest

    def step_completed(self) -> None:
        """Advance the generation after an asynchronous reload step."""
        self._generation += 1

    def is_current(self, token: ReloadToken) -> bool:
        """True while *token* is the latest reload of this still-open context."""
        return not self._closed and token == self._latest

    def publish_config(self, token: ReloadToken, config: dict[str, Any]) -> bool:
        if not self.is_current(token):
            return False
        self._config = MappingProxyType(dict(config))
        self._config_error = None
        return True

    def publish_error(self, token: ReloadToken, message: str | None) -> bool:
        if not self.is_current(token):
            return False
        self._config = None
        self._config_error = message
        return True

    def close(self) -> None:
        """Retire this context; pending reloads can no longer publish into it."""
        self._closed = True

    def __repr__(self) -> str:
        return (
            f"ProjectContext(root={str(self.root)!r}, generation={self._generation}, "
            f"closed={self._closed})"
        )
