"""Preview assembly pipeline for CodeForge."""

from codeforge.compiler.classifier import Classifier, classify
from codeforge.compiler.linker import LinkedBundle, link_framework
from codeforge.compiler.pipeline import AssemblyPipeline, AssemblyResult
from codeforge.compiler.scaffold import SANDBOX_FLAGS, ScaffoldOptions, assemble
from codeforge.compiler.templating import RenderedTemplate, render_templating

__all__ = [
    "SANDBOX_FLAGS",
    "AssemblyPipeline",
    "AssemblyResult",
    "Classifier",
    "LinkedBundle",
    "RenderedTemplate",
    "ScaffoldOptions",
    "assemble",
    "classify",
    "link_framework",
    "render_templating",
]
