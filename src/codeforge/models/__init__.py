"""Pydantic domain models for CodeForge."""

from codeforge.models.artifact import Artifact, ProjectKind
from codeforge.models.console import ConsoleMessage, LogEvent, LogType

__all__ = [
    "Artifact",
    "ConsoleMessage",
    "LogEvent",
    "LogType",
    "ProjectKind",
]
