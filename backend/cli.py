"""
Entry point: log-receiver <ip> <port>

Serves the session endpoints on ip:port and prints every received log
line to stdout. State lives in memory only; stop the process to forget it.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

import uvicorn
from pydantic import ValidationError

from config import Settings
from main import create_app

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="log-receiver",
        description="Accept chunked log uploads and print them to the console.",
    )
    parser.add_argument("ip", help="address to bind, e.g. 127.0.0.1")
    parser.add_argument("port", type=int, help="port to bind")
    return parser


class _BelowWarning(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


def console_handlers() -> list[logging.Handler]:
    """Received lines go to stdout; diagnostics (WARNING and up) to stderr."""
    out = logging.StreamHandler(sys.stdout)
    out.addFilter(_BelowWarning())
    err = logging.StreamHandler(sys.stderr)
    err.setLevel(logging.WARNING)
    for handler in (out, err):
        handler.setFormatter(logging.Formatter("%(message)s"))
    return [out, err]


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, handlers=console_handlers(), force=True)


def banner(base_url: str) -> str:
    return f"Create a session with\n\n  curl -XPOST {base_url}/sessions\n"


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = Settings.from_env()
    except ValidationError as exc:
        parser.error(f"invalid environment settings:\n{exc}")
    configure_logging(settings.log_level)

    base_url = f"http://{args.ip}:{args.port}"
    app = create_app(base_url, settings=settings)

    logger.info(banner(base_url))
    uvicorn.run(
        app,
        host=args.ip,
        port=args.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
