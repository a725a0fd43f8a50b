"""Preview sessions: a client's projects plus the documents built from them.

A session owns one :class:`ProjectStore` and caches every preview document
assembled for its projects.  Artifact sets are immutable once loaded, so a
cached document stays valid until its project is removed or the session
ends.  Sessions expire after ``ttl_seconds`` without use; the shared default
session (stdio MCP clients) never expires.
"""

from __future__ import annotations

import logging
import secrets
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from codeforge.compiler.pipeline import AssemblyResult
from codeforge.service.project_store import ProjectStore

logger = logging.getLogger("codeforge.sessions")

DEFAULT_SESSION_ID = "__default__"


class SessionNotFoundError(KeyError):
    """Raised when a session ID is unknown or has expired."""


@dataclass
class SessionInfo:
    session_id: str
    created_at: datetime
    last_accessed_at: datetime
    project_count: int
    preview_count: int
    metadata: dict[str, str]


@dataclass
class _Session:
    session_id: str
    store: ProjectStore
    expires_at: float  # on the manager's clock; inf for the default session
    metadata: dict[str, str] = field(default_factory=dict)
    previews: dict[str, AssemblyResult] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_accessed_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class SessionManager:
    """Thread-safe registry of preview sessions.

    :meth:`start` runs a daemon thread that drops expired sessions every
    ``cleanup_interval`` seconds; lookups also expire sessions lazily, so the
    thread is optional.
    """

    def __init__(
        self,
        ttl_seconds: int = 1800,
        cleanup_interval: int = 60,
        store_factory: Callable[[], ProjectStore] = ProjectStore,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._cleanup_interval = cleanup_interval
        self._store_factory = store_factory
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: dict[str, _Session] = {}
        self._stop_event = threading.Event()
        self._cleanup_thread: threading.Thread | None = None

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> None:
        if self._cleanup_thread is not None:
            return
        self._stop_event.clear()
        self._cleanup_thread = threading.Thread(
            target=self._cleanup_loop, daemon=True, name="session-cleanup"
        )
        self._cleanup_thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._cleanup_thread is not None:
            self._cleanup_thread.join(timeout=5)
            self._cleanup_thread = None

    # -- sessions ------------------------------------------------------------

    def create_session(self, metadata: dict[str, str] | None = None) -> SessionInfo:
        session = _Session(
            session_id=secrets.token_hex(16),
            store=self._store_factory(),
            expires_at=self._clock() + self._ttl,
            metadata=dict(metadata or {}),
        )
        with self._lock:
            self._sessions[session.session_id] = session
        logger.debug("Created session %s", session.session_id)
        return self._info(session)

    def get_store(self, session_id: str) -> ProjectStore:
        """Return the session's store and extend its lifetime.

        Raises :class:`SessionNotFoundError` if the session is missing or expired.
        """
        with self._lock:
            return self._use(session_id).store

    def get_session(self, session_id: str) -> SessionInfo:
        with self._lock:
            session = self._use(session_id)
        return self._info(session)

    def default_store(self) -> ProjectStore:
        """Store of the shared default session, created on first use."""
        with self._lock:
            return self._use(DEFAULT_SESSION_ID).store

    def close_session(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFoundError(f"Session '{session_id}' not found")
        logger.debug("Closed session %s", session_id)

    def list_sessions(self) -> list[SessionInfo]:
        """Info for every live session except the default one."""
        now = self._clock()
        with self._lock:
            live = [
                s
                for s in self._sessions.values()
                if s.session_id != DEFAULT_SESSION_ID and s.expires_at > now
            ]
        return [self._info(s) for s in live]

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(1 for s in self._sessions.values() if s.expires_at > now)

    # -- previews ------------------------------------------------------------

    def preview(self, project_id: str, session_id: str | None = None) -> AssemblyResult:
        """Assembled preview for a project, built once per session.

        Raises :class:`SessionNotFoundError` for an unknown session and
        ``KeyError`` for an unknown project.
        """
        with self._lock:
            session = self._use(session_id or DEFAULT_SESSION_ID)
            cached = session.previews.get(project_id)
            if cached is not None and project_id not in session.store:
                del session.previews[project_id]
                cached = None
        if cached is not None:
            return cached
        result = session.store.assemble(project_id)
        with self._lock:
            return session.previews.setdefault(project_id, result)

    # -- expiry --------------------------------------------------------------

    def purge_expired(self) -> int:
        """Drop expired sessions and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [sid for sid, s in self._sessions.items() if s.expires_at <= now]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.info("Purged %d expired session(s)", len(expired))
        return len(expired)

    def _cleanup_loop(self) -> None:
        while not self._stop_event.wait(timeout=self._cleanup_interval):
            self.purge_expired()

    # -- internal ------------------------------------------------------------

    def _use(self, session_id: str) -> _Session:
        """Resolve a live session and push back its deadline (lock held)."""
        now = self._clock()
        session = self._sessions.get(session_id)
        if session is None:
            if session_id != DEFAULT_SESSION_ID:
                raise SessionNotFoundError(f"Session '{session_id}' not found")
            session = _Session(
                session_id=DEFAULT_SESSION_ID,
                store=self._store_factory(),
                expires_at=float("inf"),
            )
            self._sessions[DEFAULT_SESSION_ID] = session
        elif session.expires_at <= now:
            del self._sessions[session_id]
            raise SessionNotFoundError(f"Session '{session_id}' has expired")
        elif session_id != DEFAULT_SESSION_ID:
            session.expires_at = now + self._ttl
        session.last_accessed_at = datetime.now(UTC)
        return session

    @staticmethod
    def _info(session: _Session) -> SessionInfo:
        return SessionInfo(
            session_id=session.session_id,
            created_at=session.created_at,
            last_accessed_at=session.last_accessed_at,
            project_count=len(session.store.list_projects()),
            preview_count=sum(1 for pid in session.previews if pid in session.store),
            metadata=session.metadata,
        )
