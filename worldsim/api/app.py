"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from worldsim.api.dependencies import set_engine_manager
from worldsim.api.engine_manager import EngineManager
from worldsim.api.routes import api_router
from worldsim.config import SimulationConfig
from worldsim.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(
    config: SimulationConfig | None = None,
    manager: EngineManager | None = None,
    autostart: bool = True,
) -> FastAPI:
    """Build and return the fully-configured FastAPI application.

    Pass *manager* to serve an existing engine (tests do this) and
    ``autostart=False`` to leave the scheduler stopped until
    ``POST /control/start``.
    """
    if config is None:
        config = manager.config if manager is not None else SimulationConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level, _config.engine_log_level)
        engine = manager or EngineManager(_config)
        set_engine_manager(engine)
        if autostart:
            engine.start()
        logger.info("API server started — simulation %s.", "running" if engine.running else "stopped")
        yield
        engine.stop()
        set_engine_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="World Simulation Engine",
        description=(
            "Autonomous town simulation — NPC actors, teams, gangs and royal court.\n\n"
            "## API Groups\n\n"
            "- **State** — Live world data: actors, teams, court, respawn queue, news events\n"
            "- **Control** — Simulation lifecycle: start, stop, step, reset\n"
            "- **Config** — Read-only simulation configuration\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Live world data read under the engine lock."},
            {"name": "Control", "description": "Simulation lifecycle controls: start, stop, single-step, and reset."},
            {"name": "Config", "description": "Read-only simulation configuration parameters."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app
