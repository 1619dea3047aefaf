"""Command line entry point that starts the web server."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import Optional, Sequence

from multirogue.server import DEFAULT_PORT, Server

logger = logging.getLogger(__name__)


def _version() -> str:
    try:
        return version("multirogue")
    except PackageNotFoundError:
        return "unknown"


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse the command line; the port defaults to $PORT, then 8080."""
    parser = argparse.ArgumentParser(
        prog="multirogue", description="Web server for a multiplayer Rogue game."
    )
    parser.add_argument("--version", action="version", version=_version())
    parser.add_argument(
        "--port",
        type=int,
        default=os.environ.get("PORT", str(DEFAULT_PORT)),
        help="Port to listen on.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the server; returns 1 if it cannot start."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    server = Server(args.port)
    try:
        asyncio.run(server.start())
    except OSError as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())