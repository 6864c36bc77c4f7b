from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console


@dataclass(slots=True)
class CLIContext:
    console: Console
