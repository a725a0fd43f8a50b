"""Native-language simulators for code that cannot run in a browser."""

# Import simulators to trigger registration
import codeforge.simulator.cpp as _cpp  # noqa: F401
import codeforge.simulator.generic as _generic  # noqa: F401
import codeforge.simulator.go as _go  # noqa: F401
import codeforge.simulator.java as _java  # noqa: F401
import codeforge.simulator.python as _python  # noqa: F401
from codeforge.models.artifact import Artifact
from codeforge.simulator.base import NativeSimulator
from codeforge.simulator.registry import SimulatorRegistry, UnsupportedSimulatorError


def simulate(artifact: Artifact) -> str:
    """Return console statements approximating the artifact's output."""
    return SimulatorRegistry.for_artifact(artifact).simulate(artifact)


__all__ = [
    "NativeSimulator",
    "SimulatorRegistry",
    "UnsupportedSimulatorError",
    "simulate",
]
