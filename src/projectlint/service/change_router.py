"""Filters project file-change notifications down to config file changes."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

from projectlint.config.loader import CONFIG_FILE_NAME


def _contains(target: Path, paths: Iterable[str | Path] | None) -> bool:
    if not paths:
        return False
    return any(Path(p) == target for p in paths)


class ConfigChangeRouter:
    """Triggers a reload when a change notification touches the config file."""

    def __init__(
        self,
        project_root: Callable[[], Path | None],
        trigger_reload: Callable[[], object],
        file_name: str = CONFIG_FILE_NAME,
    ) -> None:
        self._project_root = project_root
        self._trigger_reload = trigger_reload
        self._file_name = file_name

    def handle(
        self,
        changed_path: str | Path | None = None,
        added: Iterable[str | Path] | None = None,
        removed: Iterable[str | Path] | None = None,
    ) -> bool:
        """Trigger a reload if the notification concerns the config file."""
        root = self._project_root()
        if root is None:
            return False
        config_path = Path(root) / self._file_name
        if (
            (changed_path is not None and Path(changed_path) == config_path)
            or _contains(config_path, added)
            or _contains(config_path, removed)
        ):
            self._trigger_reload()
            return True
        return False
