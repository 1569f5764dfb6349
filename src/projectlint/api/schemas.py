"""API request/response Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from projectlint.models.diagnostics import Diagnostic


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = ""


# ---------------------------------------------------------------------------
# Session schemas
# ---------------------------------------------------------------------------


class SessionCreateRequest(BaseModel):
    """Request body for POST /sessions."""

    project_root: str | None = Field(None, description="Project to open right away")
    metadata: dict[str, str] = Field(default_factory=dict)


class SessionResponse(BaseModel):
    """Single session info."""

    session_id: str
    created_at: datetime
    last_accessed_at: datetime
    project_root: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)


class SessionListResponse(BaseModel):
    """Response for GET /sessions."""

    sessions: list[SessionResponse]


# ---------------------------------------------------------------------------
# Project & config schemas
# ---------------------------------------------------------------------------


class ProjectOpenRequest(BaseModel):
    """Request body for PUT /sessions/{session_id}/project."""

    project_root: str
    wait: bool = Field(True, description="Wait for the config reload to settle")


class ConfigStateResponse(BaseModel):
    """Published config state of the open project."""

    project_root: str | None = None
    config: dict[str, Any] | None = None
    config_error: str | None = None
    generation: int = 0
    run_requests: int = 0


class FileChangeRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/events/files."""

    changed_path: str | None = None
    added: list[str] = []
    removed: list[str] = []


class FileChangeResponse(BaseModel):
    reload_triggered: bool


# ---------------------------------------------------------------------------
# Lint schemas
# ---------------------------------------------------------------------------


class ActiveDocumentRequest(BaseModel):
    """Request body for PUT /sessions/{session_id}/active-document."""

    file_path: str
    text: str | None = Field(None, description="Current editor text; omit to keep the last one")


class LintRequestBody(BaseModel):
    """Request body for POST /sessions/{session_id}/lint."""

    text: str
    file_path: str


class LintResponse(BaseModel):
    """Scan result; ``errors`` is null when nothing was found."""

    inspector: str
    errors: list[Diagnostic] | None = None


class PreferencesRequest(BaseModel):
    """Request body for PUT /sessions/{session_id}/preferences."""

    disabled: bool


class PreferencesResponse(BaseModel):
    disabled: bool
