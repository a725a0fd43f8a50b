"""FastMCP server exposing CodeForge's preview pipeline as MCP tools.

Run via::

    codeforge-mcp                       # reads .env (default: stdio)
    MCP_TRANSPORT=http codeforge-mcp    # streamable HTTP on port 9000

Sessions scope each client's ``ProjectStore``.  In stdio mode a default
session is used automatically; in HTTP mode callers must create sessions
explicitly.
"""

from __future__ import annotations

import json
import logging

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from codeforge import __version__
from codeforge.compiler.pipeline import AssemblyPipeline
from codeforge.parser.extractor import extract
from codeforge.service.project_store import ProjectStore
from codeforge.service.session_manager import SessionManager, SessionNotFoundError
from codeforge.settings import Settings
from codeforge.simulator import SimulatorRegistry

# ---------------------------------------------------------------------------
# Server + shared state
# ---------------------------------------------------------------------------

logger = logging.getLogger("codeforge.mcp")

mcp = FastMCP("CodeForge")
_session_manager: SessionManager | None = None
_pipeline = AssemblyPipeline()


def _resolve_store(session_id: str | None = None) -> ProjectStore:
    """Resolve a session_id to its ProjectStore.

    - If *session_id* is provided, look it up in the session manager.
    - If ``None``, use the default session (stdio).
    """
    if _session_manager is None:
        raise ToolError("Session manager not initialised")
    if session_id is not None:
        try:
            return _session_manager.get_store(session_id)
        except SessionNotFoundError as exc:
            raise ToolError(str(exc)) from exc
    return _session_manager.default_store()


# ---------------------------------------------------------------------------
# Stateless tools
# ---------------------------------------------------------------------------


@mcp.tool
def extract_artifacts(text: str) -> str:
    """Split generative-model output into files.

    Files are expected between ``***FILE_START: name***`` and
    ``***FILE_END***`` markers; fenced markdown code blocks are used when no
    markers are present.  Returns a JSON list of ``{name, language, content}``.

    Args:
        text: Raw model output.
    """
    logger.info("extract_artifacts called (text length=%d)", len(text))
    return json.dumps([a.model_dump() for a in extract(text)], indent=2)


@mcp.tool
def classify_project(text: str) -> str:
    """Report how the files in model output would be previewed.

    One of ``native`` (console simulation), ``framework`` (React),
    ``templating`` (Liquid) or ``plain`` (HTML/CSS/JS).

    Args:
        text: Raw model output.
    """
    return str(_pipeline.classify(extract(text)))


@mcp.tool
def assemble_preview(text: str) -> str:
    """Assemble model output into a single sandboxable HTML document.

    Args:
        text: Raw model output.
    """
    logger.info("assemble_preview called (text length=%d)", len(text))
    result = _pipeline.run(text)
    for warning in result.warnings:
        logger.debug("assemble_preview: %s", warning)
    return result.document


@mcp.tool
def list_simulators() -> str:
    """List native-language simulators and the file extensions they handle."""
    lines = []
    for name in SimulatorRegistry.available():
        extensions = sorted(SimulatorRegistry.get(name).extensions)
        lines.append(f"{name}: {', '.join(extensions) or '(fallback)'}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Session tools
# ---------------------------------------------------------------------------


@mcp.tool
def create_session(metadata_json: str | None = None) -> str:
    """Create a session holding its own projects.

    Args:
        metadata_json: Optional JSON object of string metadata.
    """
    if _session_manager is None:
        raise ToolError("Session manager not initialised")
    metadata: dict[str, str] = {}
    if metadata_json:
        try:
            metadata = json.loads(metadata_json)
        except json.JSONDecodeError as exc:
            raise ToolError(f"Invalid metadata JSON: {exc}") from exc
    info = _session_manager.create_session(metadata=metadata)
    return f"session_id: {info.session_id}\ncreated_at: {info.created_at.isoformat()}"


@mcp.tool
def close_session(session_id: str) -> str:
    """Close a session and drop its projects."""
    if _session_manager is None:
        raise ToolError("Session manager not initialised")
    try:
        _session_manager.close_session(session_id)
    except SessionNotFoundError as exc:
        raise ToolError(str(exc)) from exc
    return f"Session '{session_id}' closed."


@mcp.tool
def load_project(text: str, session_id: str | None = None) -> str:
    """Store the files of model output as a project.

    Args:
        text: Raw model output.
        session_id: Session to load into (optional in stdio mode).
    """
    store = _resolve_store(session_id)
    result = store.load_text(text)
    parts = [
        f"Project loaded.  project_id: {result.project_id}",
        f"  kind:  {result.kind}",
        f"  files: {', '.join(result.files) or '(none)'}",
    ]
    return "\n".join(parts)


@mcp.tool
def get_project_preview(project_id: str, session_id: str | None = None) -> str:
    """Return the sandboxable HTML document for a loaded project.

    The document is assembled on first request and reused afterwards.

    Args:
        project_id: Project returned by ``load_project``.
        session_id: Session holding the project (optional in stdio mode).
    """
    if _session_manager is None:
        raise ToolError("Session manager not initialised")
    try:
        result = _session_manager.preview(project_id, session_id)
    except KeyError as exc:  # unknown session or project
        raise ToolError(str(exc)) from exc
    return result.document


@mcp.tool
def record_project_log(
    project_id: str,
    message: str,
    log_type: str = "log",
    source: str | None = None,
    session_id: str | None = None,
) -> str:
    """Record a console message relayed from a project's preview sandbox.

    Args:
        project_id: Project whose preview produced the message.
        message: Console text.
        log_type: One of ``log``, ``error``, ``warn`` or ``info``.
        source: Message source tag; defaults to the configured console tag.
            Messages carrying any other tag are rejected.
        session_id: Session holding the project (optional in stdio mode).
    """
    store = _resolve_store(session_id)
    payload = {
        "source": source if source is not None else _pipeline.options.source_tag,
        "type": log_type,
        "message": message,
    }
    try:
        event = store.record_log(project_id, payload)
    except KeyError as exc:
        raise ToolError(str(exc)) from exc
    except ValueError as exc:
        raise ToolError(str(exc)) from exc
    return f"Recorded {event.type} at {event.timestamp}."


@mcp.tool
def get_project_logs(project_id: str, session_id: str | None = None) -> str:
    """Return the console events recorded for a project's preview."""
    store = _resolve_store(session_id)
    try:
        events = store.get_logs(project_id)
    except KeyError as exc:
        raise ToolError(str(exc)) from exc
    if not events:
        return "No console output."
    return "\n".join(f"{e.timestamp} [{e.type}] {e.message}" for e in events)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the MCP server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.info(
        "CodeForge MCP Server v%s starting (transport=%s)",
        __version__,
        settings.mcp_transport,
    )

    global _session_manager, _pipeline  # noqa: PLW0603
    _pipeline = AssemblyPipeline.from_settings(settings)
    _session_manager = SessionManager(
        ttl_seconds=settings.session_ttl_seconds,
        cleanup_interval=settings.session_cleanup_interval,
        store_factory=lambda: ProjectStore(_pipeline),
    )
    _session_manager.start()

    try:
        if settings.mcp_transport == "stdio":
            mcp.run(transport="stdio")
        else:
            mcp.run(
                transport=settings.mcp_transport,
                host=settings.mcp_server_host,
                port=settings.mcp_server_port,
                log_level=settings.log_level.lower(),
            )
    finally:
        _session_manager.stop()


if __name__ == "__main__":
    main()
