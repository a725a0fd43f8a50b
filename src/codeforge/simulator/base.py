"""Abstract base for native-language simulators.

A simulator never executes anything: it reads the source text, recognises a
few output idioms and emits JavaScript console statements that reproduce the
expected console transcript inside the sandbox.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from codeforge.models.artifact import Artifact

_UNESCAPED_QUOTE_RE = re.compile(r'(?<!\\)"')


def js_string(message: str) -> str:
    """Quote *message* as a double-quoted JavaScript string literal.

    Escape sequences already present in the source literal are kept, so a
    ``\\n`` inside a print call still prints a line break.  A dangling
    backslash is doubled so it cannot swallow the closing quote, and ``</``
    is written as ``<\\/`` so the literal can sit inside an inline script.
    """
    escaped = _UNESCAPED_QUOTE_RE.sub(r'\\"', message).replace("\n", "\\n")
    if (len(escaped) - len(escaped.rstrip("\\"))) % 2:
        escaped += "\\"
    escaped = escaped.replace("</", "<\\/")
    return f'"{escaped}"'


def console_log(message: str) -> str:
    return f"console.log({js_string(message)});"


class NativeSimulator(ABC):
    """Abstract base for all simulators."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def extensions(self) -> frozenset[str]:
        """Lower-cased file extensions handled by this simulator."""

    @abstractmethod
    def simulate(self, artifact: Artifact) -> str:
        """Return JavaScript that reproduces the artifact's console output."""


class PrintCallSimulator(NativeSimulator):
    """Emits one console line per print call with a single string literal.

    Subclasses provide ``print_pattern`` whose group ``message`` captures the
    literal text.  Calls with non-literal arguments do not match and are
    skipped.
    """

    print_pattern: re.Pattern[str]

    def messages(self, source: str) -> list[str]:
        return [m.group("message") for m in self.print_pattern.finditer(source)]

    def simulate(self, artifact: Artifact) -> str:
        return "\n".join(console_log(msg) for msg in self.messages(artifact.content))
