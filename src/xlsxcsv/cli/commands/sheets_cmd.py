from __future__ import annotations

import argparse

from rich.table import Table

from xlsxcsv.application.services.conversion_service import ConversionService
from xlsxcsv.cli.context import CLIContext
from xlsxcsv.core.config import ConversionOptions
from xlsxcsv.infrastructure.package.part_reader import PackagePartReader


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("sheets", help="List the sheets declared by a workbook")
    parser.add_argument("xlsxfile", help="xlsx file path, use '-' to read from STDIN")
    parser.set_defaults(handler=run_sheets)


def run_sheets(args: argparse.Namespace, ctx: CLIContext) -> int:
    with PackagePartReader.open(args.xlsxfile) as reader:
        run = ConversionService(reader, ConversionOptions()).load_run()

    out = Table(title=f"Sheets in {args.xlsxfile}")
    out.add_column("#", justify="right")
    out.add_column("Name")
    out.add_column("Part", overflow="fold")
    out.add_column("State")
    for position, sheet in enumerate(run.sheets, start=1):
        out.add_row(str(position), sheet.name, sheet.part_path, sheet.state)
    ctx.console.print(out)
    ctx.console.print(f"Shared strings: {len(run.shared_strings)}")
    return 0
