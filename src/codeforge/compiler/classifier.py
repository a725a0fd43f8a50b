"""Project classification: which assembly strategy an artifact set needs.

Detection is string-based on purpose.  Artifacts come from a generative
model and are not guaranteed to parse, and a wrong guess only degrades the
preview.  The tables below are configuration: pass extended copies to
:class:`Classifier` to recognise more spellings or languages.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from codeforge.models.artifact import Artifact, ProjectKind

PREVIEW_DOCUMENT = "preview.html"
MARKUP_EXTENSIONS: tuple[str, ...] = ("html",)
SCRIPT_EXTENSIONS: tuple[str, ...] = ("js", "jsx", "ts", "tsx")
STYLE_EXTENSIONS: tuple[str, ...] = ("css",)
TEMPLATING_EXTENSIONS: tuple[str, ...] = ("liquid",)
NATIVE_EXTENSIONS: tuple[str, ...] = ("cpp", "c", "py", "java", "rs", "go", "php")
FRAMEWORK_NEEDLES: tuple[str, ...] = (
    "import React",
    "react-dom",
    'from "react"',
    "from 'react'",
)


@dataclass(frozen=True)
class Classifier:
    """Heuristic classifier with overridable lookup tables."""

    native_extensions: tuple[str, ...] = NATIVE_EXTENSIONS
    framework_needles: tuple[str, ...] = FRAMEWORK_NEEDLES
    templating_extensions: tuple[str, ...] = TEMPLATING_EXTENSIONS

    # -- detection -----------------------------------------------------------

    def find_preview(self, artifacts: Sequence[Artifact]) -> Artifact | None:
        """The explicitly generated ``preview.html``, if any."""
        return next((a for a in artifacts if a.name.lower() == PREVIEW_DOCUMENT), None)

    def find_markup(self, artifacts: Sequence[Artifact]) -> Artifact | None:
        """The first HTML artifact other than the preview document."""
        return next(
            (
                a
                for a in artifacts
                if a.extension in MARKUP_EXTENSIONS and a.name.lower() != PREVIEW_DOCUMENT
            ),
            None,
        )

    def script_artifacts(self, artifacts: Sequence[Artifact]) -> list[Artifact]:
        return [a for a in artifacts if a.extension in SCRIPT_EXTENSIONS]

    def style_artifacts(self, artifacts: Sequence[Artifact]) -> list[Artifact]:
        return [a for a in artifacts if a.extension in STYLE_EXTENSIONS]

    def find_native(self, artifacts: Sequence[Artifact]) -> Artifact | None:
        return next((a for a in artifacts if a.extension in self.native_extensions), None)

    def find_templating(self, artifacts: Sequence[Artifact]) -> Artifact | None:
        return next((a for a in artifacts if a.extension in self.templating_extensions), None)

    def is_framework(self, artifacts: Sequence[Artifact]) -> bool:
        """True when any script artifact carries a framework import signature."""
        return any(
            needle in a.content
            for a in self.script_artifacts(artifacts)
            for needle in self.framework_needles
        )

    def is_native(self, artifacts: Sequence[Artifact]) -> bool:
        if self.find_preview(artifacts) or self.find_markup(artifacts):
            return False
        if self.script_artifacts(artifacts) or self.style_artifacts(artifacts):
            return False
        return self.find_native(artifacts) is not None

    # -- classification ------------------------------------------------------

    def classify(self, artifacts: Sequence[Artifact]) -> ProjectKind:
        if self.is_native(artifacts):
            return ProjectKind.NATIVE
        if self.is_framework(artifacts):
            return ProjectKind.FRAMEWORK
        if self.find_templating(artifacts) is not None:
            return ProjectKind.TEMPLATING
        return ProjectKind.PLAIN


_default = Classifier()


def classify(artifacts: Sequence[Artifact]) -> ProjectKind:
    """Classify with the default tables."""
    return _default.classify(artifacts)
