"""Per-project ``.htmlvalidate.json`` loader.

Absence of the file is a normal state and yields ``None``; a file that is
present but unreadable or not a JSON object raises a ``ConfigLoadError``
whose message is shown to the user.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import aiofiles

from projectlint.models.errors import ConfigParseError, ConfigReadError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".htmlvalidate.json"

_JSON_ERROR = "Error: HTML Validator config file `{0}` is not valid JSON"
_READ_ERROR = "Error reading HTML Validator config file `{0}`"

# Returns the unsaved editor text for a path, or None to read from disk.
TextSource = Callable[[Path], Awaitable[str | None]]


def display_path(path: str | Path, project_root: str | Path | None = None) -> str:
    """Project-relative path when *path* lies inside *project_root*, else absolute."""
    path = Path(path)
    if project_root is not None:
        try:
            return path.relative_to(project_root).as_posix()
        except ValueError:
            pass
    return str(path)


class ConfigLoader:
    """Reads the config file of a project directory without blocking the loop."""

    def __init__(
        self,
        file_name: str = CONFIG_FILE_NAME,
        text_source: TextSource | None = None,
    ) -> None:
        self._file_name = file_name
        self._text_source = text_source

    @property
    def file_name(self) -> str:
        return self._file_name

    async def _read_text(self, path: Path) -> str:
        if self._text_source is not None:
            text = await self._text_source(path)
            if text is not None:
                return text
        async with aiofiles.open(path, "r", encoding="utf-8") as handle:
            return await handle.read()

    async def load(self, directory: str | Path) -> dict[str, Any] | None:
        """Load and parse the config file in *directory*.

        Returns ``None`` when the file does not exist.  Raises
        ``ConfigParseError`` for malformed content and ``ConfigReadError``
        for every other I/O failure.
        """
        path = Path(directory) / self._file_name
        shown = display_path(path, directory)
        try:
            content = await self._read_text(path)
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as exc:
            logger.info("html-lint: error decoding %s: %s", path, exc)
            raise ConfigParseError(_JSON_ERROR.format(shown), str(path)) from exc
        except OSError as exc:
            logger.error("Error reading HTML Validator config file %s: %s", path, exc)
            raise ConfigReadError(_READ_ERROR.format(shown), str(path)) from exc

        try:
            config = json.loads(content)
        except json.JSONDecodeError as exc:
            # Expected while the user is still typing; not worth more than INFO.
            logger.info("html-lint: error parsing %s: %s", path, exc)
            raise ConfigParseError(_JSON_ERROR.format(shown), str(path)) from exc
        if not isinstance(config, dict):
            logger.info("html-lint: %s does not hold a JSON object", path)
            raise ConfigParseError(_JSON_ERROR.format(shown), str(path))

        logger.info("html-lint: loaded config file for project %s", path)
        return config
