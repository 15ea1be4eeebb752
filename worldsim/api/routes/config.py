"""GET /api/v1/config — expose simulation configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from worldsim.api.dependencies import get_engine_manager
from worldsim.api.engine_manager import EngineManager
from worldsim.api.schemas import SimulationConfigResponse

router = APIRouter()


@router.get("/config", response_model=SimulationConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> SimulationConfigResponse:
    cfg = manager.config
    return SimulationConfigResponse(
        world_seed=cfg.world_seed,
        initial_actor_count=cfg.initial_actor_count,
        tick_interval=cfg.tick_interval,
        default_location=cfg.default_location,
        respawn_ticks=cfg.respawn_ticks,
        load_respawn_ticks=cfg.load_respawn_ticks,
        activity_chance=cfg.activity_chance,
        max_team_size=cfg.max_team_size,
        max_gang_size=cfg.max_gang_size,
        solo_max_rounds=cfg.solo_max_rounds,
        group_max_rounds=cfg.group_max_rounds,
        team_max_rounds=cfg.team_max_rounds,
        max_guards=cfg.max_guards,
        max_active_plots=cfg.max_active_plots,
    )
