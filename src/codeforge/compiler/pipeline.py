"""Orchestrates the full preview pipeline: Text → Artifacts → Kind → Document."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from codeforge.compiler.classifier import Classifier
from codeforge.compiler.linker import APP_DECLARATIONS, has_mount_call
from codeforge.compiler.scaffold import ScaffoldOptions, assemble
from codeforge.models.artifact import Artifact, ProjectKind
from codeforge.parser.extractor import extract, strip
from codeforge.settings import Settings

logger = logging.getLogger("codeforge.compiler")


@dataclass
class AssemblyResult:
    """The result of assembling a preview document."""

    document: str
    kind: ProjectKind
    artifacts: list[Artifact]
    explanation: str = ""
    warnings: list[str] = field(default_factory=list)


class AssemblyPipeline:
    """Orchestrates: Extraction → Classification → Transformation → Scaffold."""

    def __init__(
        self,
        options: ScaffoldOptions | None = None,
        classifier: Classifier | None = None,
    ) -> None:
        self._options = options or ScaffoldOptions()
        self._classifier = classifier or Classifier()

    @classmethod
    def from_settings(cls, settings: Settings) -> AssemblyPipeline:
        return cls(
            ScaffoldOptions(
                source_tag=settings.console_source_tag,
                target_origin=settings.sandbox_target_origin,
                root_id=settings.root_element_id,
                native_delay_ms=settings.native_start_delay_ms,
            )
        )

    @property
    def options(self) -> ScaffoldOptions:
        return self._options

    def classify(self, artifacts: Sequence[Artifact]) -> ProjectKind:
        return self._classifier.classify(artifacts)

    def run(self, text: str) -> AssemblyResult:
        """Extract artifacts from model output and assemble them."""
        artifacts = extract(text)
        result = self.assemble(artifacts)
        result.explanation = strip(text)
        if not artifacts:
            result.warnings.insert(0, "No files found in model output")
        return result

    def assemble(self, artifacts: Sequence[Artifact]) -> AssemblyResult:
        """Assemble an already extracted artifact set."""
        artifacts = list(artifacts)
        kind = self._classifier.classify(artifacts)
        logger.debug("Classified %d artifacts as %s", len(artifacts), kind)

        warnings: list[str] = []
        if kind is ProjectKind.NATIVE:
            native = self._classifier.find_native(artifacts)
            if native is not None:
                warnings.append(f"Console output of {native.name} is simulated, not executed")
        elif kind is ProjectKind.FRAMEWORK:
            scripts = self._classifier.script_artifacts(artifacts)
            if not any(has_mount_call(a.content) for a in scripts) and any(
                decl in a.content for a in scripts for decl in APP_DECLARATIONS
            ):
                warnings.append("No mount call found; App is mounted automatically")

        document = assemble(artifacts, options=self._options, classifier=self._classifier)
        return AssemblyResult(
            document=document,
            kind=kind,
            artifacts=artifacts,
            warnings=warnings,
        )
