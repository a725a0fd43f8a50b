"""CodeForge: turns generative-model output into sandboxed preview documents."""

__version__ = "0.4.0"
