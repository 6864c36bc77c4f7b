from __future__ import annotations

import argparse
import logging
import os
import sys

from rich.console import Console

from xlsxcsv.cli.commands import convert_cmd, sheets_cmd
from xlsxcsv.cli.context import CLIContext
from xlsxcsv.core.errors import SinkWriteError, XlsxCsvError
from xlsxcsv.core.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xlsx2csv",
        description="xlsx to csv converter",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    subparsers = parser.add_subparsers(dest="command", required=True)
    convert_cmd.register(subparsers)
    sheets_cmd.register(subparsers)

    return parser


def _silence_stdout() -> None:
    # Reader went away; point stdout at devnull so the interpreter's final flush stays quiet.
    try:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    except (OSError, ValueError):
        pass


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    ctx = CLIContext(console=Console())

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 2

    try:
        return handler(args, ctx)
    except BrokenPipeError:
        _silence_stdout()
        return 0
    except SinkWriteError as exc:
        if exc.broken_pipe:
            _silence_stdout()
            return 0
        logger.error(str(exc))
        return 1
    except XlsxCsvError as exc:
        logger.error(str(exc))
        return 1
