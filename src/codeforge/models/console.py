"""Console bridge message and log event models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class LogType(StrEnum):
    LOG = "log"
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


class ConsoleMessage(BaseModel):
    """Wire schema posted by the sandboxed document to its host."""

    source: str
    type: LogType
    message: str


class LogEvent(BaseModel):
    """A console line received from a sandbox run."""

    type: LogType
    message: str
    timestamp: str
