"""
Command-line entry point: run the dashboard under uvicorn.

Run with: python -m xsip_dashboard --backend http://localhost:8080
"""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import replace

import uvicorn

from xsip_dashboard import __version__
from xsip_dashboard.core.config import DashboardConfig, set_config
from xsip_dashboard.core.logging import configure_logging, get_logger
from xsip_dashboard.web.app import create_app

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="XSIP Carrier Dashboard")
    parser.add_argument("--config", help="Path to a JSON config file")
    parser.add_argument("--backend", help="Carrier backend base URL (default: from config)")
    parser.add_argument("--host", help="Host to bind to (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to run on (default: 8050)")
    parser.add_argument("--poll-interval", type=float, help="Seconds between polls (default: 4)")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload on file changes")
    parser.add_argument("--no-access-log", action="store_true", help="Disable request logging")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_config(args: argparse.Namespace) -> DashboardConfig:
    """Config from file/environment with command-line overrides on top."""
    config = DashboardConfig.from_file(args.config) if args.config else DashboardConfig.from_env()

    backend = config.backend
    if args.backend:
        backend = replace(backend, endpoint=args.backend)

    server = config.server
    if args.host:
        server = replace(server, host=args.host)
    if args.port:
        server = replace(server, port=args.port)
    if args.no_access_log:
        server = replace(server, access_log=False)

    sync = config.sync
    if args.poll_interval:
        sync = replace(sync, poll_interval_seconds=args.poll_interval)

    return replace(config, backend=backend, server=server, sync=sync)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=logging.INFO, verbose=args.verbose)

    config = load_config(args)
    set_config(config)

    logger.info(f"XSIP Carrier Dashboard v{__version__}")
    logger.info(f"Dashboard URL: http://localhost:{config.server.port}")
    logger.info(f"Backend:       {config.backend.endpoint}")
    if config.config_file_path:
        logger.info(f"Config file:   {config.config_file_path}")

    if args.reload:
        # The reloaded worker rebuilds its config from the environment
        if args.config:
            os.environ["CONFIG_FILE"] = args.config
        os.environ["XSIP_BACKEND_URL"] = config.backend.endpoint
        os.environ["XSIP_POLL_INTERVAL"] = str(config.sync.poll_interval_seconds)
        os.environ["XSIP_ACCESS_LOG"] = "1" if config.server.access_log else "0"
        uvicorn.run(
            "xsip_dashboard.web.app:create_app",
            factory=True,
            host=config.server.host,
            port=config.server.port,
            reload=True,
            log_level="warning",
            access_log=False,
        )
    else:
        uvicorn.run(
            create_app(config=config),
            host=config.server.host,
            port=config.server.port,
            log_level="warning",
            access_log=False,
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
