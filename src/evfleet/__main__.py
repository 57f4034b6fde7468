"""Run the fleet dashboard HTTP server.

Usage::

    python -m evfleet --port 8080 --autostart --seed 7
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import Any

from aiohttp import web

from evfleet.config import FleetConfig
from evfleet.dashboard import FleetDashboard
from evfleet.exceptions import FleetConfigError
from evfleet.web import create_app

_logger = logging.getLogger("evfleet")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="evfleet",
        description="Simulated EV fleet telemetry dashboard served over HTTP/JSON.",
    )
    parser.add_argument("--host", help="Bind address (env EVFLEET_HOST, default 127.0.0.1)")
    parser.add_argument("--port", type=int, help="Port (env EVFLEET_PORT, default 8080)")
    parser.add_argument("--interval", type=int, help="Simulation interval in ms, clamped to 1000-5000")
    parser.add_argument("--seed", type=int, help="Seed for reproducible fleets and telemetry")
    parser.add_argument("--autostart", action="store_true", default=None, help="Start the simulation immediately")
    parser.add_argument("--log-level", help="Logging level (env EVFLEET_LOG_LEVEL, default INFO)")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> FleetConfig:
    """Environment configuration with command-line flags layered on top."""
    overrides: dict[str, Any] = {}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.interval is not None:
        overrides["simulation_interval_ms"] = args.interval
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.autostart is not None:
        overrides["autostart_simulation"] = args.autostart
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return FleetConfig.from_env(**overrides)


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    try:
        config = build_config(args)
    except FleetConfigError as exc:
        print(f"evfleet: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # The dashboard schedules its timers on the running loop, so it is
    # built inside the app factory rather than here.
    async def _app_factory() -> web.Application:
        dashboard = FleetDashboard(config)
        _logger.info(
            "Serving %d vehicles (simulation %s, interval %d ms)",
            len(dashboard.store),
            "running" if dashboard.simulation.is_running else "stopped",
            dashboard.simulation.interval_ms,
        )
        return create_app(dashboard)

    web.run_app(_app_factory(), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
