"""Entry point: ``python -m worldsim``.

Supports two modes:
  - ``python -m worldsim``                 → Launch the FastAPI server with the simulation running
  - ``python -m worldsim cli --ticks N``   → Headless run of N steps, printing status
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Autonomous World Simulation Engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--actors", type=int, default=60)
    srv.add_argument("--interval", type=float, default=30.0, help="Seconds between simulation steps")
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])
    srv.add_argument("--engine-log-level", type=str, default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                     help="Separate level for the per-tick engine log")

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless simulation")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--ticks", type=int, default=100)
    cli.add_argument("--actors", type=int, default=60)
    cli.add_argument("--report-every", type=int, default=10)
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])
    cli.add_argument("--engine-log-level", type=str, default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from worldsim.api.app import create_app
    from worldsim.config import SimulationConfig

    config = SimulationConfig(
        world_seed=args.seed,
        initial_actor_count=args.actors,
        tick_interval=args.interval,
        log_level=args.log_level,
        engine_log_level=args.engine_log_level,
    )
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from worldsim.api.engine_manager import EngineManager
    from worldsim.config import SimulationConfig
    from worldsim.utils.logging import setup_logging

    config = SimulationConfig(
        world_seed=args.seed,
        initial_actor_count=args.actors,
        log_level=args.log_level,
        engine_log_level=args.engine_log_level,
    )
    setup_logging(config.log_level, config.engine_log_level)

    manager = EngineManager(config)
    failed = 0
    for _ in range(args.ticks):
        if not manager.step():
            failed += 1
        if args.report_every > 0 and manager.tick % args.report_every == 0:
            logger.info("Tick %d: %s", manager.tick, manager.simulator.status())

    for event in manager.feed.latest(20):
        if event.significant:
            print(f"[tick {event.tick:>4}] {event.message}")
    print(manager.simulator.status())
    logger.info("Done. %d ticks, %d failed, %d news events.", manager.tick, failed, len(manager.feed))


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
