"""Simulator listing endpoint: GET /simulators."""

from __future__ import annotations

from fastapi import APIRouter

from codeforge.api.schemas import SimulatorInfo, SimulatorListResponse
from codeforge.simulator import SimulatorRegistry

router = APIRouter()


@router.get("", response_model=SimulatorListResponse)
async def list_simulators() -> SimulatorListResponse:
    """List all native-language simulators and the extensions they handle."""
    simulators = []
    for name in SimulatorRegistry.available():
        simulator = SimulatorRegistry.get(name)
        simulators.append(SimulatorInfo(name=name, extensions=sorted(simulator.extensions)))
    return SimulatorListResponse(simulators=simulators)
