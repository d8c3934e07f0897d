"""Command-line entrypoint.

Run::

    python -m rpcscope --endpoint http://127.0.0.1:8545

The endpoint may also come from ``RPCSCOPE_ENDPOINT`` (a ``.env`` file in
the working directory is honoured).
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from rpcscope.client import DEFAULT_TIMEOUT

DEFAULT_ENDPOINT = "http://127.0.0.1:8545"

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rpcscope",
        description="Browse, call and replay JSON-RPC methods from the terminal",
    )
    parser.add_argument(
        "--endpoint",
        type=str,
        default=os.getenv("RPCSCOPE_ENDPOINT", DEFAULT_ENDPOINT),
        help="JSON-RPC HTTP endpoint requests are POSTed to",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=float(os.getenv("RPCSCOPE_TIMEOUT", DEFAULT_TIMEOUT)),
        help="Request timeout in seconds",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=os.getenv("RPCSCOPE_LOG_FILE"),
        help="Write logs here (the terminal itself is owned by the UI)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level",
    )
    return parser


def configure_logging(log_file: str | None, level: str) -> None:
    if log_file is None:
        logging.basicConfig(handlers=[logging.NullHandler()])
        return
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> None:
    load_dotenv(os.path.join(Path.cwd(), ".env"))
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.log_level)

    from rpcscope.terminal import run

    log.info("starting against %s (timeout=%.1fs)", args.endpoint, args.timeout)
    run(args.endpoint, timeout=args.timeout)


if __name__ == "__main__":
    main()
