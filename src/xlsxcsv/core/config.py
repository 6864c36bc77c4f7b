from __future__ import annotations

import csv
import re
from dataclasses import dataclass, field
from enum import Enum

from xlsxcsv.core.errors import ConfigurationError

DEFAULT_DELIMITER = ","
DEFAULT_LINE_TERMINATOR = "\n"
DEFAULT_SHEET_DELIMITER = "--------"
DEFAULT_QUOTING = "minimal"
DEFAULT_OUTPUT_ENCODING = "utf-8"

QUOTING_MODES = {
    "none": csv.QUOTE_NONE,
    "minimal": csv.QUOTE_MINIMAL,
    "nonnumeric": csv.QUOTE_NONNUMERIC,
    "all": csv.QUOTE_ALL,
}

_TAB_ALIASES = {"tab", "\\t", "x09"}
_ESCAPE_SEQUENCES = (
    ("\\n", "\n"),
    ("\\r", "\r"),
    ("\\t", "\t"),
    ("\\f", "\x0c"),
    ("x07", "\x07"),
    ("x09", "\t"),
)


class TextPolicy(Enum):
    PRESERVE = "preserve"
    ESCAPE = "escape"
    SPACE = "space"


@dataclass(frozen=True)
class SheetSelection:
    sheet_name: str | None = None
    sheet_index: int | None = None
    all_sheets: bool = False
    include_patterns: tuple[str, ...] = ()
    exclude_patterns: tuple[str, ...] = ()


@dataclass(frozen=True)
class CsvDialect:
    delimiter: str = DEFAULT_DELIMITER
    quoting: str = DEFAULT_QUOTING
    line_terminator: str = DEFAULT_LINE_TERMINATOR

    @property
    def csv_quoting(self) -> int:
        return QUOTING_MODES[self.quoting]


@dataclass(frozen=True)
class ConversionOptions:
    selection: SheetSelection = field(default_factory=SheetSelection)
    dialect: CsvDialect = field(default_factory=CsvDialect)
    skip_empty_rows: bool = False
    trim_trailing_columns: bool = False
    escape_control_chars: bool = False
    no_line_breaks: bool = False
    sheet_delimiter: str = DEFAULT_SHEET_DELIMITER
    output_encoding: str = DEFAULT_OUTPUT_ENCODING

    @property
    def text_policy(self) -> TextPolicy:
        if self.escape_control_chars:
            return TextPolicy.ESCAPE
        if self.no_line_breaks:
            return TextPolicy.SPACE
        return TextPolicy.PRESERVE


def parse_delimiter(raw: str) -> str:
    if raw in _TAB_ALIASES:
        return "\t"
    if len(raw) == 1:
        return raw
    raise ConfigurationError(f"Invalid delimiter: {raw!r} (expected one character or 'tab')")


def parse_escape_sequence(raw: str) -> str:
    value = raw
    for token, replacement in _ESCAPE_SEQUENCES:
        value = value.replace(token, replacement)
    return value


def parse_quoting(raw: str) -> str:
    normalized = raw.strip().lower()
    if normalized not in QUOTING_MODES:
        choices = ", ".join(sorted(QUOTING_MODES))
        raise ConfigurationError(f"Invalid quoting style: {raw!r} (choose from {choices})")
    return normalized


def _validate_patterns(patterns: list[str] | tuple[str, ...] | None, label: str) -> tuple[str, ...]:
    checked: list[str] = []
    for pattern in patterns or ():
        try:
            re.compile(pattern)
        except re.error as exc:
            raise ConfigurationError(f"Invalid {label} pattern {pattern!r}: {exc}") from exc
        checked.append(pattern)
    return tuple(checked)


def load_conversion_options(
    *,
    sheet_name: str | None = None,
    sheet_index: int | None = None,
    all_sheets: bool = False,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    delimiter: str = DEFAULT_DELIMITER,
    quoting: str = DEFAULT_QUOTING,
    line_terminator: str = DEFAULT_LINE_TERMINATOR,
    skip_empty_rows: bool = False,
    trim_trailing_columns: bool = False,
    escape_control_chars: bool = False,
    no_line_breaks: bool = False,
    sheet_delimiter: str = DEFAULT_SHEET_DELIMITER,
    output_encoding: str = DEFAULT_OUTPUT_ENCODING,
) -> ConversionOptions:
    """Build validated conversion options from raw user-facing values.

    Delimiter, line terminator and sheet separator accept the same escape
    spellings as the command line (``tab``, ``\\t``, ``x07`` and so on).
    """
    terminator = parse_escape_sequence(line_terminator)
    if not terminator:
        raise ConfigurationError("Line terminator must not be empty")

    selection = SheetSelection(
        sheet_name=sheet_name,
        sheet_index=sheet_index,
        all_sheets=all_sheets,
        include_patterns=_validate_patterns(include_patterns, "include"),
        exclude_patterns=_validate_patterns(exclude_patterns, "exclude"),
    )
    dialect = CsvDialect(
        delimiter=parse_delimiter(delimiter),
        quoting=parse_quoting(quoting),
        line_terminator=terminator,
    )
    return ConversionOptions(
        selection=selection,
        dialect=dialect,
        skip_empty_rows=skip_empty_rows,
        trim_trailing_columns=trim_trailing_columns,
        escape_control_chars=escape_control_chars,
        no_line_breaks=no_line_breaks,
        sheet_delimiter=parse_escape_sequence(sheet_delimiter),
        output_encoding=output_encoding,
    )
