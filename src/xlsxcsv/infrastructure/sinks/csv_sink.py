from __future__ import annotations

import csv
import errno
import re
from collections.abc import Sequence
from typing import TextIO

from xlsxcsv.core.config import CsvDialect
from xlsxcsv.core.errors import SinkWriteError

_NUMERIC_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class _NumericText:
    """Numeric-looking text that the csv module leaves unquoted under QUOTE_NONNUMERIC."""

    __slots__ = ("text",)

    def __init__(self, text: str) -> None:
        self.text = text

    def __str__(self) -> str:
        return self.text

    def __float__(self) -> float:
        return float(self.text)


def is_broken_pipe(exc: BaseException | None) -> bool:
    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        if isinstance(exc, BrokenPipeError):
            return True
        if isinstance(exc, OSError) and exc.errno == errno.EPIPE:
            return True
        if isinstance(exc, SinkWriteError) and exc.broken_pipe:
            return True
        exc = exc.__cause__ or exc.__context__
    return False


class CsvRecordSink:
    def __init__(self, stream: TextIO, dialect: CsvDialect) -> None:
        self.stream = stream
        self.dialect = dialect
        self.records_written = 0
        self._nonnumeric = dialect.csv_quoting == csv.QUOTE_NONNUMERIC
        self._unquoted = dialect.csv_quoting == csv.QUOTE_NONE
        # Unquoted fields go out as-is apart from a backslash before the delimiter and line breaks.
        self._escapes = str.maketrans(
            {char: "\\" + char for char in dialect.delimiter + dialect.line_terminator + "\r\n"}
        )
        self._writer = csv.writer(
            stream,
            delimiter=dialect.delimiter,
            quoting=dialect.csv_quoting,
            lineterminator=dialect.line_terminator,
        )

    def write_record(self, fields: Sequence[str]) -> None:
        try:
            if self._unquoted:
                self._write_unquoted(fields)
            else:
                self._writer.writerow(self._wrap_numbers(fields) if self._nonnumeric else fields)
        except (OSError, csv.Error) as exc:
            raise SinkWriteError(f"Failed to write CSV record: {exc}", broken_pipe=is_broken_pipe(exc)) from exc
        self.records_written += 1

    def _write_unquoted(self, fields: Sequence[str]) -> None:
        line = self.dialect.delimiter.join(value.translate(self._escapes) for value in fields)
        self.stream.write(line + self.dialect.line_terminator)

    @staticmethod
    def _wrap_numbers(fields: Sequence[str]) -> list[object]:
        return [_NumericText(value) if _NUMERIC_RE.fullmatch(value) else value for value in fields]

    def flush(self) -> None:
        try:
            self.stream.flush()
        except OSError as exc:
            raise SinkWriteError(f"Failed to flush CSV output: {exc}", broken_pipe=is_broken_pipe(exc)) from exc
