"""FastAPI dependency: the EngineManager bound by the app lifespan."""

from __future__ import annotations

from fastapi import HTTPException

from worldsim.api.engine_manager import EngineManager

_engine_manager: EngineManager | None = None


def set_engine_manager(manager: EngineManager | None) -> None:
    """Bind *manager* for request handlers; ``None`` unbinds it on shutdown."""
    global _engine_manager
    _engine_manager = manager


def get_engine_manager() -> EngineManager:
    """Return the bound manager, or answer 503 while the server is starting or stopping."""
    manager = _engine_manager
    if manager is None:
        raise HTTPException(status_code=503, detail="Simulation engine is not available.")
    return manager
