#!/usr/bin/env python3
"""
NoNap entry point: keeps the configured endpoints warm and serves the control API.

Usage:
    python main.py [--host 0.0.0.0] [--port 3030] [--targets targets.json]
"""
from __future__ import annotations

import argparse
from dataclasses import replace

import uvicorn

from nonap.core.config import settings
from nonap.core.logging import configure_logging
from nonap.main import create_app


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Keep endpoints warm with randomized periodic pings.")
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Port (default: {settings.port})")
    parser.add_argument(
        "--targets",
        default=settings.targets_file,
        help=f"Path to the targets JSON file (default: {settings.targets_file})",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (default: INFO)")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    cfg = replace(settings, host=args.host, port=args.port, targets_file=args.targets, log_level=args.log_level)
    configure_logging(cfg.log_level)
    uvicorn.run(create_app(cfg), host=cfg.host, port=cfg.port, log_config=None)


if __name__ == "__main__":
    main()
