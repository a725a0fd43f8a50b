"""Simulator plugin registry: discover and register native-language simulators."""

from __future__ import annotations

from codeforge.models.artifact import Artifact
from codeforge.simulator.base import NativeSimulator

FALLBACK_SIMULATOR = "generic"


class UnsupportedSimulatorError(Exception):
    """Raised when a requested simulator is not registered."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.simulator_name = name
        self.available = available
        super().__init__(f"Unsupported simulator '{name}'. Available: {', '.join(available)}")


class SimulatorRegistry:
    """Registry for native-language simulator plugins."""

    _simulators: dict[str, type[NativeSimulator]] = {}

    @classmethod
    def register(cls, simulator_class: type[NativeSimulator]) -> type[NativeSimulator]:
        """Register a simulator class. Can be used as a decorator."""
        instance = simulator_class()
        cls._simulators[instance.name] = simulator_class
        return simulator_class

    @classmethod
    def get(cls, name: str) -> NativeSimulator:
        """Get an instance of the named simulator."""
        if name not in cls._simulators:
            raise UnsupportedSimulatorError(name, available=cls.available())
        return cls._simulators[name]()

    @classmethod
    def for_artifact(cls, artifact: Artifact) -> NativeSimulator:
        """Pick the simulator claiming the artifact's extension, else the fallback."""
        ext = artifact.extension
        for simulator_class in cls._simulators.values():
            simulator = simulator_class()
            if ext in simulator.extensions:
                return simulator
        return cls.get(FALLBACK_SIMULATOR)

    @classmethod
    def available(cls) -> list[str]:
        """List registered simulator names."""
        return sorted(cls._simulators.keys())

    @classmethod
    def reset(cls) -> None:
        """Clear all registered simulators (for testing)."""
        cls._simulators.clear()
