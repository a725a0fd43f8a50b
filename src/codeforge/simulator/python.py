"""Python simulator: literal ``print`` calls."""

from __future__ import annotations

import re

from codeforge.simulator.base import PrintCallSimulator
from codeforge.simulator.registry import SimulatorRegistry


@SimulatorRegistry.register
class PythonSimulator(PrintCallSimulator):
    """``print('...')`` / ``print("...")``."""

    print_pattern = re.compile(r"print\s*\(\s*(['\"])(?P<message>(?:(?!\1)[^\\]|\\.)*)\1\s*\)")

    @property
    def name(self) -> str:
        return "python"

    @property
    def extensions(self) -> frozenset[str]:
        return frozenset({"py"})
