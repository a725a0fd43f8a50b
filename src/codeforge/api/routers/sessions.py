"""Session-scoped endpoints for project loading, preview and console logs."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from codeforge.api.deps import get_session_manager, require_session_listing
from codeforge.api.schemas import (
    ConsoleMessageRequest,
    LogClearResponse,
    LogListResponse,
    ProjectDetailResponse,
    ProjectLoadRequest,
    ProjectLoadResponse,
    ProjectSummaryResponse,
    SessionCreateRequest,
    SessionListResponse,
    SessionResponse,
)
from codeforge.models.console import LogEvent
from codeforge.service.project_store import ProjectStore
from codeforge.service.session_manager import SessionInfo, SessionManager, SessionNotFoundError

router = APIRouter()


# -- helpers -----------------------------------------------------------------


def _get_store(session_id: str, mgr: SessionManager) -> ProjectStore:
    """Resolve session_id to ProjectStore, raise 404 if missing/expired."""
    try:
        return mgr.get_store(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found") from None


def _project_not_found(project_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Project '{project_id}' not found")


def _session_response(info: SessionInfo) -> SessionResponse:
    """Convert a SessionInfo dataclass to a Pydantic response."""
    d = asdict(info)
    return SessionResponse(**d)


# -- session CRUD ------------------------------------------------------------


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    body: SessionCreateRequest | None = None,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> SessionResponse:
    """Create a new session."""
    metadata = body.metadata if body else {}
    info = mgr.create_session(metadata=metadata)
    return _session_response(info)


@router.get(
    "",
    response_model=SessionListResponse,
    dependencies=[Depends(require_session_listing)],
)
async def list_sessions(
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> SessionListResponse:
    """List all active sessions."""
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


# -- projects ----------------------------------------------------------------


@router.post(
    "/{session_id}/projects",
    response_model=ProjectLoadResponse,
    status_code=201,
)
async def load_project(
    session_id: str,
    body: ProjectLoadRequest,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> ProjectLoadResponse:
    """Extract files from model output and store them as a project."""
    store = _get_store(session_id, mgr)
    result = store.load_text(body.text)
    return ProjectLoadResponse(**asdict(result))


@router.get("/{session_id}/projects", response_model=list[ProjectSummaryResponse])
async def list_projects(
    session_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> list[ProjectSummaryResponse]:
    """List projects loaded in a session."""
    store = _get_store(session_id, mgr)
    return [ProjectSummaryResponse(**asdict(p)) for p in store.list_projects()]


@router.get("/{session_id}/projects/{project_id}", response_model=ProjectDetailResponse)
async def get_project(
    session_id: str,
    project_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> ProjectDetailResponse:
    """Return a project's files and explanation."""
    store = _get_store(session_id, mgr)
    try:
        artifacts = store.get_artifacts(project_id)
        explanation = store.get_explanation(project_id)
    except KeyError:
        raise _project_not_found(project_id) from None
    return ProjectDetailResponse(
        project_id=project_id,
        kind=store.classify(project_id),
        artifacts=artifacts,
        explanation=explanation,
    )


@router.delete("/{session_id}/projects/{project_id}", status_code=204)
async def remove_project(
    session_id: str,
    project_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> None:
    """Unload a project from a session."""
    store = _get_store(session_id, mgr)
    try:
        store.remove_project(project_id)
    except KeyError:
        raise _project_not_found(project_id) from None


@router.get("/{session_id}/projects/{project_id}/preview", response_class=HTMLResponse)
async def preview_project(
    session_id: str,
    project_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> HTMLResponse:
    """Serve the preview document for an iframe, assembled once per session."""
    try:
        result = mgr.preview(project_id, session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found") from None
    except KeyError:
        raise _project_not_found(project_id) from None
    return HTMLResponse(content=result.document)


# -- console logs ------------------------------------------------------------


@router.post(
    "/{session_id}/projects/{project_id}/logs",
    response_model=LogEvent,
    status_code=201,
)
async def record_log(
    session_id: str,
    project_id: str,
    body: ConsoleMessageRequest,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> LogEvent:
    """Append a console message relayed from the preview sandbox."""
    store = _get_store(session_id, mgr)
    try:
        return store.record_log(project_id, body.model_dump())
    except KeyError:
        raise _project_not_found(project_id) from None
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None


@router.get("/{session_id}/projects/{project_id}/logs", response_model=LogListResponse)
async def get_logs(
    session_id: str,
    project_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> LogListResponse:
    """Return every console event recorded for a project, oldest first."""
    store = _get_store(session_id, mgr)
    try:
        events = store.get_logs(project_id)
    except KeyError:
        raise _project_not_found(project_id) from None
    return LogListResponse(events=events)


@router.delete("/{session_id}/projects/{project_id}/logs", response_model=LogClearResponse)
async def clear_logs(
    session_id: str,
    project_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> LogClearResponse:
    """Clear a project's console events."""
    store = _get_store(session_id, mgr)
    try:
        cleared = store.clear_logs(project_id)
    except KeyError:
        raise _project_not_found(project_id) from None
    return LogClearResponse(cleared=cleared)
