#!/usr/bin/env python
"""
Start the TaskFlow API under uvicorn.

Command-line flags override the matching settings (HOST, PORT, RELOAD,
LOG_LEVEL) for a single run.

Usage:
    python run_api.py
    python run_api.py --reload --port 5001
"""

import argparse

import uvicorn

from shared.config import get_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the TaskFlow API server")
    parser.add_argument("--host", help="Interface to bind (default: HOST)")
    parser.add_argument("--port", type=int, help="Port to bind (default: PORT)")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    uvicorn.run(
        "api:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload or settings.reload,
        log_level=(args.log_level or settings.log_level).lower(),
    )


if __name__ == "__main__":
    main()
