"""Logging setup for the server and the headless CLI."""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s [%(levelname)-5s] %(name)-28s | %(message)s"


def _to_level(name: str | None, default: int = logging.INFO) -> int:
    if not name:
        return default
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else default


def setup_logging(level: str = "INFO", engine_level: str | None = None) -> None:
    """Send all simulator output to stdout.

    *engine_level* overrides the level of ``worldsim.engine`` alone so the
    per-tick chatter can be turned up to DEBUG (or silenced) without
    touching startup and API messages.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(_to_level(level))
    root.handlers.clear()
    root.addHandler(handler)

    engine = logging.getLogger("worldsim.engine")
    engine.setLevel(_to_level(engine_level, logging.NOTSET))

    # One access line per /state poll would drown the simulation log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
