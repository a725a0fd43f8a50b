"""Artifact extraction from raw model output.

The primary format wraps every file in delimiter markers::

    ***FILE_START: src/App.jsx***
    ...content...
    ***FILE_END***

When no delimited block is present, fenced markdown code blocks are used
instead, taking the file name from the line right before each fence.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from codeforge.models.artifact import Artifact

FILE_START = "***FILE_START:"
FILE_END = "***FILE_END***"

_DELIMITED_RE = re.compile(r"\*\*\*FILE_START:\s*(.*?)\s*\*\*\*([\s\S]*?)\*\*\*FILE_END\*\*\*")
_DELIMITED_REGION_RE = re.compile(r"\*\*\*FILE_START[\s\S]*?\*\*\*FILE_END\*\*\*")

# One fence wrapper is allowed inside a delimited block.
_LEADING_FENCE_RE = re.compile(r"^```[a-z]*\n", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\n```$")

# Fallback: ```lang\n ... ``` (closing fence matches the opening length)
_FENCED_BLOCK_RE = re.compile(r"(`{3,})([a-zA-Z0-9_-]*)\n([\s\S]*?)\1")
_LABELLED_NAME_RE = re.compile(r"(?:file|filename):\s*([a-zA-Z0-9_./-]+)", re.IGNORECASE)
_BARE_NAME_RE = re.compile(r"^([a-zA-Z0-9_./-]+):$")

_FENCE_EXTENSIONS: dict[str, str] = {
    "ts": "ts",
    "typescript": "ts",
    "js": "js",
    "javascript": "js",
}


def _language_for(filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1].lower()
    return ext or "text"


def _unfence(body: str) -> str:
    body = _LEADING_FENCE_RE.sub("", body, count=1)
    return _TRAILING_FENCE_RE.sub("", body, count=1)


def _name_hint(preceding: str) -> str | None:
    """Return a filename mentioned on the last line before a code fence."""
    lines = preceding.strip().split("\n")
    last_line = lines[-1] if lines else ""
    match = _LABELLED_NAME_RE.search(last_line) or _BARE_NAME_RE.match(last_line)
    return match.group(1) if match else None


def _extract_delimited(text: str) -> list[Artifact]:
    artifacts: list[Artifact] = []
    for match in _DELIMITED_RE.finditer(text):
        filename = match.group(1).strip()
        if not filename:
            continue
        content = _unfence(match.group(2).strip())
        artifacts.append(
            Artifact(name=filename, language=_language_for(filename), content=content)
        )
    return artifacts


def _extract_fenced(text: str) -> list[Artifact]:
    artifacts: list[Artifact] = []
    counter = 1
    for match in _FENCED_BLOCK_RE.finditer(text):
        lang = match.group(2) or "text"
        content = match.group(3).strip()
        ext = _FENCE_EXTENSIONS.get(lang.lower(), "txt")
        filename = _name_hint(text[: match.start()]) or f"file_{counter}.{ext}"
        artifacts.append(Artifact(name=filename, language=lang, content=content))
        counter += 1
    return artifacts


def extract(text: str) -> list[Artifact]:
    """Split model output into artifacts, in source order.

    Never raises: text without any recognisable block yields ``[]``.
    """
    artifacts = _extract_delimited(text)
    if artifacts:
        return artifacts
    return _extract_fenced(text)


def strip(text: str) -> str:
    """Remove every delimited file region, leaving the prose around it."""
    return _DELIMITED_REGION_RE.sub("", text).strip()


def serialize(artifacts: Iterable[Artifact]) -> str:
    """Render artifacts back into the delimited format."""
    return "".join(
        f"\n{FILE_START} {artifact.name}***\n{artifact.content}\n{FILE_END}\n"
        for artifact in artifacts
    )
