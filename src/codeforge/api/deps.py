"""FastAPI dependencies resolved from ``app.state``.

:func:`codeforge.api.app.create_app` builds one pipeline and one
session manager per application, so separate apps (and tests) never share
sessions.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from codeforge.compiler.pipeline import AssemblyPipeline
from codeforge.service.session_manager import SessionManager
from codeforge.settings import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_pipeline(request: Request) -> AssemblyPipeline:
    return request.app.state.pipeline


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def require_session_listing(request: Request) -> None:
    """Reject ``GET /sessions`` when listing is switched off in settings."""
    if get_settings(request).disable_session_list:
        raise HTTPException(status_code=403, detail="Session listing is disabled")
