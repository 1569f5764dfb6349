"""Dependency injection for FastAPI — SessionManager singleton."""

from __future__ import annotations

from collections.abc import Callable

from projectlint.backend.html_validate import HtmlValidateCliBackend
from projectlint.inspection.registry import LintPreferences
from projectlint.service.lint_session import LintSession
from projectlint.service.session_manager import SessionManager
from projectlint.settings import Settings

_session_manager: SessionManager | None = None
_disable_session_list: bool = False


def lint_session_factory(settings: Settings) -> Callable[[], LintSession]:
    """Build the per-session LintSession factory described by *settings*."""

    def _factory() -> LintSession:
        backend = HtmlValidateCliBackend(
            executable=settings.html_validate_bin,
            timeout=settings.backend_timeout_seconds,
        )
        return LintSession(
            backend,
            preferences=LintPreferences(disabled=settings.lint_disabled),
            watch=settings.watch_projects,
        )

    return _factory


def init_session_manager(
    manager: SessionManager, *, disable_session_list: bool = False
) -> None:
    """Set the global SessionManager (called at app startup)."""
    global _session_manager, _disable_session_list  # noqa: PLW0603
    _session_manager = manager
    _disable_session_list = disable_session_list


def get_session_manager() -> SessionManager:
    """FastAPI ``Depends`` provider for SessionManager."""
    if _session_manager is None:
        raise RuntimeError("SessionManager not initialised — call init_session_manager() first")
    return _session_manager


def is_session_list_disabled() -> bool:
    """Return True when the GET /sessions endpoint is suppressed."""
    return _disable_session_list


def reset_session_manager() -> None:
    """Clear the global SessionManager (for tests)."""
    global _session_manager, _disable_session_list  # noqa: PLW0603
    _session_manager = None
    _disable_session_list = False
