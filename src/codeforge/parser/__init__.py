"""Extraction of named artifacts from generative-model output."""

from codeforge.parser.extractor import extract, serialize, strip

__all__ = [
    "extract",
    "serialize",
    "strip",
]
