"""Artifact model and the project classification enum."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ProjectKind(StrEnum):
    NATIVE = "native"
    TEMPLATING = "templating"
    FRAMEWORK = "framework"
    PLAIN = "plain"


class Artifact(BaseModel):
    """One named unit of generated source text.

    Artifacts are immutable: an edit produces a new artifact list instead of
    mutating an existing one.  Duplicate names are allowed at this layer.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Relative path of the file")
    language: str = Field(description="Lower-cased extension or code fence tag")
    content: str = ""

    @property
    def extension(self) -> str:
        """Lower-cased suffix of ``name`` without the dot, or ``""``."""
        base = self.basename
        if "." not in base:
            return ""
        return base.rsplit(".", 1)[1].lower()

    @property
    def basename(self) -> str:
        return self.name.rsplit("/", 1)[-1]
