"""Detection of html-validate config formats this tool cannot read."""

from __future__ import annotations

from pathlib import Path

import aiofiles.os

from projectlint.config.loader import CONFIG_FILE_NAME

# Checked in this order; the first one present is reported.
UNSUPPORTED_CONFIG_FILES: tuple[str, ...] = (".htmlvalidate.js", ".htmlvalidate.cjs")

_UNSUPPORTED_ERROR = "Error: Unsupported config format `{0}`. Use a `{1}` file instead."


async def find_unsupported_config(
    project_root: str | Path,
    candidates: tuple[str, ...] = UNSUPPORTED_CONFIG_FILES,
) -> str | None:
    """Return an error message naming the first unsupported config file, if any."""
    for name in candidates:
        if await aiofiles.os.path.exists(Path(project_root) / name):
            return _UNSUPPORTED_ERROR.format(name, CONFIG_FILE_NAME)
    return None
