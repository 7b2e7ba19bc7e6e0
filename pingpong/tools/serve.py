"""Run the PingPong server.

Usage:
    python -m pingpong.tools.serve
    python -m pingpong.tools.serve --port 8080
    python -m pingpong.tools.serve --log-level DEBUG

The backend connection is established during application startup, before
the listening socket is bound. If it cannot be established the process exits
with a non-zero status without ever accepting a request.
"""

from __future__ import annotations

import argparse
import logging

import uvicorn

from pingpong.config import settings
from pingpong.main import create_app

LOG_FORMAT = "%(asctime)s %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def main():
    parser = argparse.ArgumentParser(description="Serve the PingPong counter")
    parser.add_argument(
        "--host", type=str, default=settings.host,
        help=f"Interface to bind (default: {settings.host})",
    )
    parser.add_argument(
        "--port", type=int, default=settings.port,
        help=f"Port to listen on (default: {settings.port})",
    )
    parser.add_argument(
        "--log-level", type=str, default=settings.log_level,
        help=f"Log level (default: {settings.log_level})",
    )
    args = parser.parse_args()

    configure_logging(args.log_level)
    logging.getLogger(__name__).info("Starting PingPong server on port %d...", args.port)

    uvicorn.run(
        create_app(settings),
        host=args.host,
        port=args.port,
        lifespan="on",
        log_config=None,
    )


if __name__ == "__main__":
    main()
