"""In-memory project registry: the service layer shared by MCP and the REST API."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass

from codeforge.compiler.pipeline import AssemblyPipeline, AssemblyResult
from codeforge.models.artifact import Artifact, ProjectKind
from codeforge.models.console import LogEvent
from codeforge.parser.extractor import extract, strip
from codeforge.service.log_stream import LogStream

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class LoadResult:
    """Result of loading model output into the store."""

    project_id: str
    kind: ProjectKind
    files: list[str]
    explanation: str


@dataclass
class ProjectSummary:
    """Short summary for listing projects."""

    project_id: str
    kind: ProjectKind
    files: int
    logs: int


@dataclass
class _Project:
    artifacts: list[Artifact]
    explanation: str
    logs: LogStream


# ---------------------------------------------------------------------------
# ProjectStore
# ---------------------------------------------------------------------------


class ProjectStore:
    """In-memory project registry.  Thread-safe via ``threading.Lock``.

    Each project holds one artifact set and the log stream of its preview.
    Projects are keyed by short UUID (8-char hex).  Reloading produces a new
    project; artifact sets are never edited in place.
    """

    def __init__(self, pipeline: AssemblyPipeline | None = None) -> None:
        self._lock = threading.Lock()
        self._projects: dict[str, _Project] = {}
        self._pipeline = pipeline or AssemblyPipeline()

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex[:8]

    def _get(self, project_id: str) -> _Project:
        with self._lock:
            try:
                return self._projects[project_id]
            except KeyError:
                raise KeyError(f"No project loaded with id '{project_id}'") from None

    # -- public API ----------------------------------------------------------

    def load_text(self, text: str) -> LoadResult:
        """Extract artifacts from model output and store them as a project."""
        return self.load_artifacts(extract(text), explanation=strip(text))

    def load_artifacts(self, artifacts: list[Artifact], explanation: str = "") -> LoadResult:
        project_id = self._new_id()
        project = _Project(
            artifacts=list(artifacts),
            explanation=explanation,
            logs=LogStream(source_tag=self._pipeline.options.source_tag),
        )
        with self._lock:
            self._projects[project_id] = project
        return LoadResult(
            project_id=project_id,
            kind=self._pipeline.classify(project.artifacts),
            files=[a.name for a in project.artifacts],
            explanation=explanation,
        )

    def get_artifacts(self, project_id: str) -> list[Artifact]:
        return list(self._get(project_id).artifacts)

    def get_explanation(self, project_id: str) -> str:
        return self._get(project_id).explanation

    def classify(self, project_id: str) -> ProjectKind:
        return self._pipeline.classify(self._get(project_id).artifacts)

    def assemble(self, project_id: str) -> AssemblyResult:
        """Build a fresh preview document.  Existing logs are kept."""
        project = self._get(project_id)
        result = self._pipeline.assemble(project.artifacts)
        result.explanation = project.explanation
        return result

    def list_projects(self) -> list[ProjectSummary]:
        with self._lock:
            items = list(self._projects.items())
        return [
            ProjectSummary(
                project_id=pid,
                kind=self._pipeline.classify(p.artifacts),
                files=len(p.artifacts),
                logs=len(p.logs),
            )
            for pid, p in items
        ]

    def remove_project(self, project_id: str) -> None:
        """Unload a project.  Raises ``KeyError`` if not found."""
        with self._lock:
            try:
                del self._projects[project_id]
            except KeyError:
                raise KeyError(f"No project loaded with id '{project_id}'") from None

    def __contains__(self, project_id: object) -> bool:
        with self._lock:
            return project_id in self._projects

    # -- logs ----------------------------------------------------------------

    def record_log(self, project_id: str, payload: dict) -> LogEvent:
        """Append a sandbox console message.  Raises ``ValueError`` if malformed."""
        return self._get(project_id).logs.receive(payload)

    def get_logs(self, project_id: str) -> list[LogEvent]:
        return self._get(project_id).logs.events()

    def clear_logs(self, project_id: str) -> int:
        return self._get(project_id).logs.clear()
