"""Fallback simulator for languages without a dedicated rewrite."""

from __future__ import annotations

from codeforge.models.artifact import Artifact
from codeforge.simulator.base import NativeSimulator, console_log
from codeforge.simulator.registry import FALLBACK_SIMULATOR, SimulatorRegistry


@SimulatorRegistry.register
class GenericSimulator(NativeSimulator):
    """Reports a successful compilation and nothing else."""

    @property
    def name(self) -> str:
        return FALLBACK_SIMULATOR

    @property
    def extensions(self) -> frozenset[str]:
        return frozenset()

    def simulate(self, artifact: Artifact) -> str:
        return console_log(f"[System] Compiled {artifact.name} successfully.")
