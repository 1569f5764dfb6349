"""Session-scoped endpoints: project events, config state, and linting."""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException

from projectlint.api.deps import get_session_manager, is_session_list_disabled
from projectlint.api.schemas import (
    ActiveDocumentRequest,
    ConfigStateResponse,
    FileChangeRequest,
    FileChangeResponse,
    LintRequestBody,
    LintResponse,
    PreferencesRequest,
    PreferencesResponse,
    ProjectOpenRequest,
    SessionCreateRequest,
    SessionListResponse,
    SessionResponse,
)
from projectlint.models.errors import LintBackendError, StaleResultError
from projectlint.service.lint_session import LintSession
from projectlint.service.session_manager import SessionInfo, SessionManager, SessionNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()


# -- helpers -----------------------------------------------------------------


def _get_lint_session(session_id: str, mgr: SessionManager) -> LintSession:
    """Resolve session_id to its LintSession, raise 404 if missing/expired."""
    try:
        return mgr.get_lint_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found") from None


def _session_response(info: SessionInfo) -> SessionResponse:
    """Convert a SessionInfo dataclass to a Pydantic response."""
    return SessionResponse(**asdict(info))


def _check_project_root(project_root: str) -> None:
    if not Path(project_root).is_dir():
        raise HTTPException(
            status_code=400, detail=f"Project root '{project_root}' is not a directory"
        )


def _config_state(lint: LintSession) -> ConfigStateResponse:
    context = lint.context
    if context is None:
        return ConfigStateResponse(run_requests=lint.run_requests)
    return ConfigStateResponse(
        project_root=str(context.root),
        config=context.snapshot_config(),
        config_error=context.config_error,
        generation=context.generation,
        run_requests=lint.run_requests,
    )


# -- session CRUD ------------------------------------------------------------


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    body: SessionCreateRequest | None = None,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> SessionResponse:
    """Create a new session, optionally opening a project in it."""
    if body and body.project_root:
        _check_project_root(body.project_root)
    info = mgr.create_session(metadata=body.metadata if body else {})
    if body and body.project_root:
        lint = mgr.get_lint_session(info.session_id)
        await lint.open_project(body.project_root)
        info = mgr.get_session(info.session_id)
    return _session_response(info)


@router.get("", response_model=SessionListResponse)
async def list_sessions(
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> SessionListResponse:
    """List all active sessions."""
    if is_session_list_disabled():
        raise HTTPException(status_code=403, detail="Session listing is disabled")
    sessions = mgr.list_sessions()
    return SessionListResponse(sessions=[_session_response(s) for s in sessions])


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> SessionResponse:
    """Get info for a specific session."""
    try:
        info = mgr.get_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found") from None
    return _session_response(info)


@router.delete("/{session_id}", status_code=204)
async def close_session(
    session_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> None:
    """Close a session and release its resources."""
    try:
        mgr.close_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found") from None


# -- project & config --------------------------------------------------------


@router.put("/{session_id}/project", response_model=ConfigStateResponse)
async def open_project(
    session_id: str,
    body: ProjectOpenRequest,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> ConfigStateResponse:
    """Open (or switch to) a project and reload its lint config."""
    lint = _get_lint_session(session_id, mgr)
    _check_project_root(body.project_root)
    task = lint.open_project(body.project_root)
    if body.wait:
        await task
    return _config_state(lint)


@router.get("/{session_id}/config", response_model=ConfigStateResponse)
async def get_config(
    session_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> ConfigStateResponse:
    """Return the published config state of the open project."""
    return _config_state(_get_lint_session(session_id, mgr))


@router.post("/{session_id}/events/files", response_model=FileChangeResponse)
async def project_files_changed(
    session_id: str,
    body: FileChangeRequest,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> FileChangeResponse:
    """Report changed/added/removed project files; reloads if the config changed."""
    lint = _get_lint_session(session_id, mgr)
    triggered = lint.project_files_changed(body.changed_path, body.added, body.removed)
    return FileChangeResponse(reload_triggered=triggered)


# -- linting -----------------------------------------------------------------


@router.put("/{session_id}/active-document", status_code=204)
async def set_active_document(
    session_id: str,
    body: ActiveDocumentRequest,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> None:
    """Focus a document; in-flight scans of other documents are cancelled."""
    lint = _get_lint_session(session_id, mgr)
    lint.set_active_document(body.file_path, body.text)


@router.delete("/{session_id}/documents", status_code=204)
async def close_document(
    session_id: str,
    file_path: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> None:
    """Drop a document's editor text once the host closes it."""
    _get_lint_session(session_id, mgr).close_document(file_path)


@router.post("/{session_id}/lint", response_model=LintResponse)
async def lint_document(
    session_id: str,
    body: LintRequestBody,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> LintResponse:
    """Scan a document with the session's HTML inspector."""
    lint = _get_lint_session(session_id, mgr)
    inspector = lint.inspector
    if not inspector.can_inspect(body.file_path):
        raise HTTPException(status_code=403, detail=f"{inspector.name} is disabled")
    try:
        result = await inspector.scan_file_async(body.text, body.file_path)
    except StaleResultError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from None
    except LintBackendError as exc:
        logger.warning("Lint backend failed for %s: %s", body.file_path, exc)
        raise HTTPException(status_code=502, detail="Lint backend failed") from None
    return LintResponse(
        inspector=inspector.name,
        errors=result.errors if result is not None else None,
    )


@router.put("/{session_id}/preferences", response_model=PreferencesResponse)
async def update_preferences(
    session_id: str,
    body: PreferencesRequest,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> PreferencesResponse:
    """Enable or disable HTML linting for the session."""
    lint = _get_lint_session(session_id, mgr)
    lint.preferences.set_disabled(body.disabled)
    return PreferencesResponse(disabled=lint.preferences.disabled)
