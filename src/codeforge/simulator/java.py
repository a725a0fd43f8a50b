"""Java simulator: literal ``System.out.print``/``println`` calls."""

from __future__ import annotations

import re

from codeforge.simulator.base import PrintCallSimulator
from codeforge.simulator.registry import SimulatorRegistry


@SimulatorRegistry.register
class JavaSimulator(PrintCallSimulator):
    print_pattern = re.compile(
        r'System\.out\.print(?:ln)?\s*\(\s*"(?P<message>(?:[^"\\]|\\.)*)"\s*\)'
    )

    @property
    def name(self) -> str:
        return "java"

    @property
    def extensions(self) -> frozenset[str]:
        return frozenset({"java"})
