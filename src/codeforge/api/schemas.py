"""API request/response Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from codeforge.models.artifact import Artifact, ProjectKind
from codeforge.models.console import LogEvent, LogType


class ExtractRequest(BaseModel):
    """Request body for POST /extract."""

    text: str = Field(description="Raw generative-model output")


class ExtractResponse(BaseModel):
    """Response body for POST /extract."""

    artifacts: list[Artifact] = []
    explanation: str = ""


class AssembleRequest(BaseModel):
    """Request body for POST /assemble: raw text or an artifact list."""

    text: str | None = None
    artifacts: list[Artifact] | None = None

    @model_validator(mode="after")
    def _one_source(self) -> AssembleRequest:
        if (self.text is None) == (self.artifacts is None):
            raise ValueError("Provide exactly one of 'text' or 'artifacts'")
        return self


class AssembleResponse(BaseModel):
    """Response body for POST /assemble."""

    document: str
    kind: ProjectKind
    files: list[str] = []
    explanation: str = ""
    warnings: list[str] = []
    sandbox: str = Field(description="iframe sandbox attribute value for the document")


class SimulatorInfo(BaseModel):
    """Information about a registered native simulator."""

    name: str
    extensions: list[str] = []


class SimulatorListResponse(BaseModel):
    """Response for GET /simulators."""

    simulators: list[SimulatorInfo] = []


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = ""


# ---------------------------------------------------------------------------
# Session schemas
# ---------------------------------------------------------------------------


class SessionCreateRequest(BaseModel):
    """Request body for POST /sessions."""

    metadata: dict[str, str] = Field(default_factory=dict)


class SessionResponse(BaseModel):
    """Single session info."""

    session_id: str
    created_at: datetime
    last_accessed_at: datetime
    project_count: int
    preview_count: int = 0
    metadata: dict[str, str] = Field(default_factory=dict)


class SessionListResponse(BaseModel):
    """Response for GET /sessions."""

    sessions: list[SessionResponse]


class ProjectLoadRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/projects."""

    text: str = Field(description="Raw generative-model output")


class ProjectLoadResponse(BaseModel):
    """Response for POST /sessions/{session_id}/projects."""

    project_id: str
    kind: ProjectKind
    files: list[str] = []
    explanation: str = ""


class ProjectSummaryResponse(BaseModel):
    """Short project summary for listing."""

    project_id: str
    kind: ProjectKind
    files: int
    logs: int


class ProjectDetailResponse(BaseModel):
    """Response for GET /sessions/{session_id}/projects/{project_id}."""

    project_id: str
    kind: ProjectKind
    artifacts: list[Artifact] = []
    explanation: str = ""


class ConsoleMessageRequest(BaseModel):
    """A message posted by the sandbox console bridge, relayed by the host."""

    source: str
    type: LogType
    message: str


class LogListResponse(BaseModel):
    """Response for GET /sessions/{session_id}/projects/{project_id}/logs."""

    events: list[LogEvent] = []


class LogClearResponse(BaseModel):
    """Response for DELETE /sessions/{session_id}/projects/{project_id}/logs."""

    cleared: int
