"""Session management — TTL-scoped LintSession instances for multi-client use."""

from __future__ import annotations

import secrets
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from projectlint.service.lint_session import LintSession


class SessionNotFoundError(KeyError):
    """Raised when a session ID is not found or has expired."""


@dataclass
class SessionInfo:
    """Public session metadata (returned by list/get)."""

    session_id: str
    created_at: datetime
    last_accessed_at: datetime
    project_root: str | None
    metadata: dict[str, str]


@dataclass
class _Session:
    """Internal session state."""

    session_id: str
    lint: LintSession
    last_accessed: float  # monotonic clock for TTL checks
    metadata: dict[str, str] = field(default_factory=dict)
    # Wall-clock times for reporting
    created_at_wall: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_accessed_wall: datetime = field(default_factory=lambda: datetime.now(UTC))


class SessionManager:
    """Manages TTL-scoped sessions, each holding its own ``LintSession``.

    Thread-safe.  Call :meth:`start` to begin the background cleanup thread
    and :meth:`stop` to shut it down.  Expired or closed sessions have their
    ``LintSession`` closed, which retires the open project context.
    """

    def __init__(
        self,
        session_factory: Callable[[], LintSession],
        ttl_seconds: int = 1800,
        cleanup_interval: float = 60,
    ) -> None:
        self._factory = session_factory
        self._ttl = ttl_seconds
        self._cleanup_interval = cleanup_interval
        self._lock = threading.Lock()
        self._sessions: dict[str, _Session] = {}
        self._stop_event = threading.Event()
        self._cleanup_thread: threading.Thread | None = None

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> None:
        """Start the background cleanup daemon thread."""
        if self._cleanup_thread is not None:
            return
        self._stop_event.clear()
        self._cleanup_thread = threading.Thread(
            target=self._cleanup_loop, daemon=True, name="session-cleanup"
        )
        self._cleanup_thread.start()

    def stop(self) -> None:
        """Signal the cleanup thread to stop, wait for it, and close all sessions."""
        self._stop_event.set()
        if self._cleanup_thread is not None:
            self._cleanup_thread.join(timeout=5)
            self._cleanup_thread = None
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.lint.close()

    # -- public API ----------------------------------------------------------

    def create_session(self, metadata: dict[str, str] | None = None) -> SessionInfo:
        """Create a new session and return its info."""
        session_id = secrets.token_hex(16)  # 32-char hex (128-bit)
        session = _Session(
            session_id=session_id,
            lint=self._factory(),
            last_accessed=time.monotonic(),
            metadata=metadata or {},
        )
        with self._lock:
            self._sessions[session_id] = session
        return self._session_info(session)

    def _touch(self, session_id: str) -> _Session:
        """Look up a live session and refresh it; expired sessions are closed."""
        now_mono = time.monotonic()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(f"Session '{session_id}' not found")
            # Lazy expiration check
            if now_mono - session.last_accessed <= self._ttl:
                session.last_accessed = now_mono
                session.last_accessed_wall = datetime.now(UTC)
                return session
            del self._sessions[session_id]
        session.lint.close()
        raise SessionNotFoundError(f"Session '{session_id}' has expired")

    def get_lint_session(self, session_id: str) -> LintSession:
        """Get the LintSession for a session, updating its last-accessed time.

        Raises :class:`SessionNotFoundError` if the session is missing or expired.
        """
        return self._touch(session_id).lint

    def get_session(self, session_id: str) -> SessionInfo:
        """Get session info (also refreshes last-accessed)."""
        return self._session_info(self._touch(session_id))

    def close_session(self, session_id: str) -> None:
        """Explicitly close a session."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(f"Session '{session_id}' not found")
        session.lint.close()

    def list_sessions(self) -> list[SessionInfo]:
        """Return info for all non-expired sessions."""
        now_mono = time.monotonic()
        with self._lock:
            return [
                self._session_info(s)
                for s in self._sessions.values()
                if now_mono - s.last_accessed <= self._ttl
            ]

    @property
    def active_count(self) -> int:
        """Number of active (non-expired) sessions."""
        now_mono = time.monotonic()
        with self._lock:
            return sum(
                1 for s in self._sessions.values() if now_mono - s.last_accessed <= self._ttl
            )

    # -- internal ------------------------------------------------------------

    @staticmethod
    def _session_info(session: _Session) -> SessionInfo:
        root = session.lint.project_root
        return SessionInfo(
            session_id=session.session_id,
            created_at=session.created_at_wall,
            last_accessed_at=session.last_accessed_wall,
            project_root=str(root) if root is not None else None,
            metadata=session.metadata,
        )

    def _purge_expired(self) -> None:
        """Remove all expired sessions (called by cleanup thread)."""
        now_mono = time.monotonic()
        with self._lock:
            expired = [
                sid for sid, s in self._sessions.items() if now_mono - s.last_accessed > self._ttl
            ]
            removed = [self._sessions.pop(sid) for sid in expired]
        for session in removed:
            session.lint.close()

    def _cleanup_loop(self) -> None:
        """Background loop that periodically purges expired sessions."""
        while not self._stop_event.wait(timeout=self._cleanup_interval):
            self._purge_expired()
