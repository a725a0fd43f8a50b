"""Go simulator: literal ``fmt.Print``/``Println``/``Printf`` calls."""

from __future__ import annotations

import re

from codeforge.simulator.base import PrintCallSimulator
from codeforge.simulator.registry import SimulatorRegistry


@SimulatorRegistry.register
class GoSimulator(PrintCallSimulator):
    """Only the first argument is read, so ``Printf`` format verbs are kept verbatim."""

    print_pattern = re.compile(r'fmt\.Print(?:ln|f)?\s*\(\s*"(?P<message>(?:[^"\\]|\\.)*)"')

    @property
    def name(self) -> str:
        return "go"

    @property
    def extensions(self) -> frozenset[str]:
        return frozenset({"go"})
