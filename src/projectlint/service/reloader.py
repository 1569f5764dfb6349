"""Generation-guarded reload of a project's lint configuration."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from projectlint.config.loader import ConfigLoader
from projectlint.config.unsupported import find_unsupported_config
from projectlint.models.errors import ConfigLoadError
from projectlint.service.project_context import ProjectContext, ReloadToken

logger = logging.getLogger(__name__)

UnsupportedCheck = Callable[[Path], Awaitable[str | None]]


class ConfigReloader:
    """Loads a project's config and publishes the outcome into its context.

    Every reload clears the context first, then resolves into exactly one
    of: a published config, a published error message, or nothing (no
    config file and no unsupported variant).  ``on_published`` is invoked
    whenever the published state was settled so the host can re-run lint.
    """

    def __init__(
        self,
        loader: ConfigLoader | None = None,
        on_published: Callable[[], None] | None = None,
        unsupported_check: UnsupportedCheck = find_unsupported_config,
    ) -> None:
        self._loader = loader or ConfigLoader()
        self._on_published = on_published
        self._unsupported_check = unsupported_check

    def _notify(self) -> None:
        if self._on_published is not None:
            self._on_published()

    @staticmethod
    def _discard(context: ProjectContext, token: ReloadToken, stage: str) -> None:
        logger.debug(
            "Discarding %s result of reload #%d for %s: superseded",
            stage, token.sequence, context.root,
        )

    async def reload(self, context: ProjectContext) -> bool:
        """Run one reload cycle.  Returns True if it published into *context*."""
        token = context.begin_reload()
        try:
            config = await self._loader.load(token.root)
        except ConfigLoadError as exc:
            context.step_completed()
            if not context.is_current(token):
                self._discard(context, token, "failed")
                return False
            context.publish_error(token, exc.message)
            self._notify()
            return True

        context.step_completed()
        if not context.is_current(token):
            self._discard(context, token, "load")
            return False

        if config is not None:
            context.publish_config(token, config)
            self._notify()
            return True

        try:
            message = await self._unsupported_check(token.root)
        except Exception:
            logger.exception("Unsupported config check failed for %s", token.root)
            return False
        if not context.is_current(token):
            self._discard(context, token, "unsupported-config")
            return False
        context.publish_error(token, message)
        self._notify()
        return True
