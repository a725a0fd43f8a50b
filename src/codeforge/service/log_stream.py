"""Host-side console log stream fed by sandbox messages."""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from codeforge.models.console import ConsoleMessage, LogEvent


def _clock_time() -> str:
    return datetime.now().strftime("%H:%M:%S")


class LogStream:
    """Append-only list of :class:`LogEvent` for one preview.

    Messages whose ``source`` differs from the configured tag are rejected;
    they come from some other script posting to the same window.  Events are
    only removed by :meth:`clear`.  Thread-safe.
    """

    def __init__(
        self,
        source_tag: str = "PREVIEW_CONSOLE",
        clock: Callable[[], str] = _clock_time,
    ) -> None:
        self._source_tag = source_tag
        self._clock = clock
        self._lock = threading.Lock()
        self._events: list[LogEvent] = []

    def receive(self, payload: Mapping[str, Any] | ConsoleMessage) -> LogEvent:
        """Validate a posted message and append it as a timestamped event.

        Raises ``ValueError`` for malformed or foreign messages.
        """
        if isinstance(payload, ConsoleMessage):
            message = payload
        else:
            try:
                message = ConsoleMessage.model_validate(payload)
            except ValidationError as exc:
                raise ValueError(f"Malformed console message: {exc}") from exc
        if message.source != self._source_tag:
            raise ValueError(f"Unexpected message source '{message.source}'")
        event = LogEvent(type=message.type, message=message.message, timestamp=self._clock())
        with self._lock:
            self._events.append(event)
        return event

    def events(self) -> list[LogEvent]:
        with self._lock:
            return list(self._events)

    def clear(self) -> int:
        """Drop all events and return how many were removed."""
        with self._lock:
            count = len(self._events)
            self._events.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
