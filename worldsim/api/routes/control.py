"""POST /api/v1/control/{action} — simulation lifecycle controls."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends

from worldsim.api.dependencies import get_engine_manager
from worldsim.api.engine_manager import EngineManager
from worldsim.api.schemas import ControlResponse

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    stop = "stop"
    step = "step"
    reset = "reset"


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    match action:
        case ControlAction.start:
            if not manager.start():
                return ControlResponse(status="noop", message="Already running.", tick=manager.tick)
            return ControlResponse(status="ok", message="Simulation started.", tick=manager.tick)

        case ControlAction.stop:
            if not manager.stop():
                return ControlResponse(status="noop", message="Not running.", tick=manager.tick)
            return ControlResponse(status="ok", message="Simulation stopped.", tick=manager.tick)

        case ControlAction.step:
            if not manager.step():
                return ControlResponse(status="error", message="Step failed; see server log.", tick=manager.tick)
            return ControlResponse(status="ok", message="Single tick executed.", tick=manager.tick)

        case ControlAction.reset:
            manager.reset()
            return ControlResponse(status="ok", message="Simulation reset.", tick=manager.tick)
