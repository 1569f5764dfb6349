"""Reload, routing and dispatch services."""

from projectlint.service.change_router import ConfigChangeRouter
from projectlint.service.dispatcher import LintDispatcher
from projectlint.service.lint_session import HTML_LINT_NAME, LintSession
from projectlint.service.project_context import ProjectContext, ReloadToken
from projectlint.service.reloader import ConfigReloader

__all__ = [
    "HTML_LINT_NAME",
    "ConfigChangeRouter",
    "ConfigReloader",
    "LintDispatcher",
    "LintSession",
    "ProjectContext",
    "ReloadToken",
]
