from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from xlsxcsv.application.services.conversion_service import ConversionService
from xlsxcsv.cli.context import CLIContext
from xlsxcsv.core.config import (
    DEFAULT_DELIMITER,
    DEFAULT_LINE_TERMINATOR,
    DEFAULT_OUTPUT_ENCODING,
    DEFAULT_QUOTING,
    DEFAULT_SHEET_DELIMITER,
    ConversionOptions,
    load_conversion_options,
)
from xlsxcsv.core.errors import SinkWriteError
from xlsxcsv.infrastructure.package.part_reader import STDIN_SOURCE, PackagePartReader
from xlsxcsv.infrastructure.sinks.csv_sink import CsvRecordSink

logger = logging.getLogger(__name__)

# Accepted for command-line compatibility; the decoder does not act on them.
_INERT_OPTIONS = (
    ("hyperlinks", "--hyperlinks"),
    ("dateformat", "--dateformat"),
    ("timeformat", "--timeformat"),
    ("floatformat", "--floatformat"),
    ("sci_float", "--sci-float"),
    ("exclude_hidden_sheets", "--exclude_hidden_sheets"),
    ("ignore_formats", "--ignore-formats"),
    ("merge_cells", "--merge-cells"),
    ("include_hidden_rows", "--include_hidden_rows"),
)


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser(
        "convert",
        help="Convert xlsx sheets to CSV",
        description=(
            "Convert xlsx sheets to CSV. Scripts written for the single-command form "
            "'xlsx2csv FILE [OUTFILE]' must now call 'xlsx2csv convert FILE [OUTFILE]'; "
            "the options are unchanged."
        ),
    )
    parser.add_argument("xlsxfile", help="xlsx file path, use '-' to read from STDIN")
    parser.add_argument("outfile", nargs="?", help="output csv file path (default: STDOUT)")

    selection = parser.add_argument_group("sheet selection")
    selection.add_argument("-a", "--all", action="store_true", help="export all sheets")
    selection.add_argument("-n", "--sheetname", help="sheet name to convert")
    selection.add_argument("-s", "--sheet", type=int, help="sheet number to convert (1-based)")
    selection.add_argument(
        "-I",
        "--include_sheet_pattern",
        action="append",
        default=[],
        help="only include sheets named matching given pattern",
    )
    selection.add_argument(
        "-E",
        "--exclude_sheet_pattern",
        action="append",
        default=[],
        help="exclude sheets named matching given pattern",
    )
    selection.add_argument(
        "--exclude_hidden_sheets",
        action="store_true",
        help="exclude hidden sheets (accepted, not applied)",
    )

    output = parser.add_argument_group("csv output")
    output.add_argument(
        "-d",
        "--delimiter",
        default=DEFAULT_DELIMITER,
        help="columns delimiter, 'tab' or 'x09' for a tab (default: comma)",
    )
    output.add_argument(
        "-q",
        "--quoting",
        default=DEFAULT_QUOTING,
        help="field quoting: 'none', 'minimal', 'nonnumeric' or 'all' (default: minimal)",
    )
    output.add_argument(
        "-l",
        "--lineterminator",
        default=DEFAULT_LINE_TERMINATOR,
        help="line terminator: '\\n', '\\r\\n' or '\\r' (default: \\n)",
    )
    output.add_argument(
        "-p",
        "--sheetdelimiter",
        default=DEFAULT_SHEET_DELIMITER,
        help="record written between sheets, '' for none (default: '--------')",
    )
    output.add_argument(
        "-c",
        "--outputencoding",
        default=DEFAULT_OUTPUT_ENCODING,
        help="encoding of output csv (only utf-8 is written)",
    )
    output.add_argument("-i", "--ignoreempty", action="store_true", help="skip empty lines")
    output.add_argument("--skipemptycolumns", action="store_true", help="skip trailing empty columns")
    output.add_argument("-e", "--escape", action="store_true", help="escape \\r\\n\\t characters")
    output.add_argument("--no-line-breaks", action="store_true", help="replace \\r\\n\\t with space")

    formats = parser.add_argument_group("formatting (accepted, not applied)")
    formats.add_argument("--hyperlinks", action="store_true")
    formats.add_argument("-f", "--dateformat")
    formats.add_argument("-t", "--timeformat")
    formats.add_argument("--floatformat")
    formats.add_argument("--sci-float", action="store_true")
    formats.add_argument("--ignore-formats", action="append", default=[])
    formats.add_argument("-m", "--merge-cells", action="store_true")
    formats.add_argument("--include_hidden_rows", action="store_true")

    parser.set_defaults(handler=run_convert)


def options_from_args(args: argparse.Namespace) -> ConversionOptions:
    return load_conversion_options(
        sheet_name=args.sheetname,
        sheet_index=args.sheet,
        all_sheets=args.all,
        include_patterns=args.include_sheet_pattern,
        exclude_patterns=args.exclude_sheet_pattern,
        delimiter=args.delimiter,
        quoting=args.quoting,
        line_terminator=args.lineterminator,
        skip_empty_rows=args.ignoreempty,
        trim_trailing_columns=args.skipemptycolumns,
        escape_control_chars=args.escape,
        no_line_breaks=args.no_line_breaks,
        sheet_delimiter=args.sheetdelimiter,
        output_encoding=args.outputencoding,
    )


def _warn_inert_options(args: argparse.Namespace) -> None:
    for attr, flag in _INERT_OPTIONS:
        if getattr(args, attr, None):
            logger.warning("%s is accepted but has no effect on the output", flag)
    if args.outputencoding.replace("_", "-").lower() not in {"utf-8", "utf8"}:
        logger.warning("Only UTF-8 output is supported; ignoring --outputencoding %s", args.outputencoding)


@contextmanager
def _open_output(outfile: str | None) -> Iterator[TextIO]:
    if outfile is None or outfile == STDIN_SOURCE:
        try:
            fd = sys.stdout.fileno()
        except (OSError, ValueError):
            yield sys.stdout
            return
        sys.stdout.flush()
        with open(fd, "w", encoding="utf-8", newline="", closefd=False) as handle:
            yield handle
        return

    try:
        handle = Path(outfile).open("w", encoding="utf-8", newline="")
    except OSError as exc:
        raise SinkWriteError(f"Cannot open output file {outfile}: {exc}") from exc
    with handle:
        yield handle


def run_convert(args: argparse.Namespace, ctx: CLIContext) -> int:
    options = options_from_args(args)
    _warn_inert_options(args)

    with PackagePartReader.open(args.xlsxfile) as reader:
        service = ConversionService(reader, options)
        service.selected_sheets()
        with _open_output(args.outfile) as stream:
            summary = service.convert(CsvRecordSink(stream, options.dialect))

    logger.info("Converted %d sheet(s), %d rows", len(summary.sheets), summary.rows_written)
    return 0
