"""C/C++ simulator: rewrites a simple ``main`` into runnable JavaScript.

Handles the subset model output for console exercises tends to use:
``cout`` chains, ``cin`` reads, primitive declarations, loops and arithmetic.
Everything else is passed through untouched and may fail at run time, which
the generated catch clause reports as a runtime error line.
"""

from __future__ import annotations

import re

from codeforge.models.artifact import Artifact
from codeforge.simulator.base import NativeSimulator
from codeforge.simulator.registry import SimulatorRegistry

_INCLUDE_RE = re.compile(r"#include\s+<.*?>")
_USING_NAMESPACE_RE = re.compile(r"using\s+namespace\s+std;")
_RETURN_ZERO_RE = re.compile(r"return\s+0;")
_MAIN_SIGNATURE_RE = re.compile(r"int\s+main\s*\([^)]*\)\s*\{")
_TYPE_KEYWORDS_RE = re.compile(
    r"\b(?:(?:const|unsigned|signed|long|int|float|double|char|string|bool|auto)\b\s*)+"
)
_CIN_RE = re.compile(r"cin\s*>>\s*([a-zA-Z0-9_]+)\s*;")
_COUT_PREFIX_RE = re.compile(r"^cout\s*<<\s*")

BANNER = "C++ Interactive Simulation Started"
RULE = "-" * 37


def extract_main_body(source: str) -> str:
    """Return the body of ``int main(...)``, or *source* when there is none.

    Braces are matched by depth.  If the braces never balance, the body runs
    to the last closing brace in the text.
    """
    match = _MAIN_SIGNATURE_RE.search(source)
    if match is None:
        return source
    start = match.end()
    depth = 1
    for index in range(start, len(source)):
        char = source[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return source[start:index]
    last_close = source.rfind("}")
    if last_close < start:
        return source[start:]
    return source[start:last_close]


def _rewrite_cin(match: re.Match[str]) -> str:
    var = match.group(1)
    return (
        f"{var} = prompt(\"Interactive Input required for '{var}':\");\n"
        f"if({var} !== null && !isNaN(Number({var})) && {var}.trim() !== '') "
        f"{var} = Number({var});\n"
        f'console.log("[Input] {var} =", {var});'
    )


def _rewrite_cout(line: str) -> str:
    stripped = line.strip()
    if not stripped.startswith("cout"):
        return line
    chain = _COUT_PREFIX_RE.sub("", stripped)
    chain = chain.removesuffix(";")
    parts = ['"\\n"' if p.strip() == "endl" else p.strip() for p in chain.split("<<")]
    return f"console.log({', '.join(parts)});"


def transpile(source: str) -> str:
    """Rewrite C++ console code into a JavaScript statement sequence."""
    js = _INCLUDE_RE.sub("", source)
    js = _USING_NAMESPACE_RE.sub("", js)
    js = _RETURN_ZERO_RE.sub("", js)
    js = extract_main_body(js)
    js = _TYPE_KEYWORDS_RE.sub("let ", js)
    js = js.replace("std::", "")
    js = _CIN_RE.sub(_rewrite_cin, js)
    return "\n".join(_rewrite_cout(line) for line in js.split("\n"))


@SimulatorRegistry.register
class CppSimulator(NativeSimulator):
    @property
    def name(self) -> str:
        return "cpp"

    @property
    def extensions(self) -> frozenset[str]:
        return frozenset({"c", "cc", "cpp", "h", "hpp"})

    def simulate(self, artifact: Artifact) -> str:
        body = transpile(artifact.content)
        return (
            f'console.log("{BANNER}");\n'
            f'console.log("{RULE}");\n'
            "(async function() {\n"
            f"{body}\n"
            f'console.log("{RULE}");\n'
            'console.log("Process finished with exit code 0");\n'
            "})().catch(function(e) {\n"
            '  console.error("Runtime Error:", e.message);\n'
            "});"
        )
