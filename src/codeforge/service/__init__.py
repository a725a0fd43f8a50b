"""Host-side services: project storage, sessions and console log streams."""

from codeforge.service.log_stream import LogStream
from codeforge.service.project_store import ProjectStore
from codeforge.service.session_manager import SessionManager, SessionNotFoundError

__all__ = [
    "LogStream",
    "ProjectStore",
    "SessionManager",
    "SessionNotFoundError",
]
