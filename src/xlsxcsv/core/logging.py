from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def configure_logging(verbosity: int = 0) -> None:
    # stdout carries CSV records, so diagnostics always go to stderr.
    level = _LEVELS.get(verbosity, logging.DEBUG)
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbosity >= 2,
        rich_tracebacks=verbosity >= 2,
    )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
