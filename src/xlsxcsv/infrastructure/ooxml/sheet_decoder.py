from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence

from xlsxcsv.core.config import ConversionOptions, TextPolicy
from xlsxcsv.core.errors import MalformedXmlError
from xlsxcsv.domain.models.workbook import CellType, SheetDescriptor
from xlsxcsv.infrastructure.ooxml.cells import column_index, normalize_text, resolve_cell_value
from xlsxcsv.infrastructure.ooxml.rows import finish_row, place_cell
from xlsxcsv.infrastructure.ooxml.xml_events import feed_events
from xlsxcsv.infrastructure.package.part_reader import PackagePartReader

logger = logging.getLogger(__name__)


class SheetRowDecoder:
    """Rebuilds dense rows from the sparse cells of one worksheet part.

    Events carry local tag names. Completed rows queue up until ``drain``.
    """

    def __init__(
        self,
        shared_strings: Sequence[str],
        *,
        skip_empty_rows: bool = False,
        trim_trailing_columns: bool = False,
        text_policy: TextPolicy = TextPolicy.PRESERVE,
    ) -> None:
        self.shared_strings = shared_strings
        self.skip_empty_rows = skip_empty_rows
        self.trim_trailing_columns = trim_trailing_columns
        self.text_policy = text_policy

        self.row: list[str] = []
        self.value_parts: list[str] = []
        self.cell_type = CellType.NUMBER
        self.column: int | None = None
        self.in_value = False
        self.in_inline = False
        self.in_phonetic = False
        self.row_has_cells = False
        self._pending: list[list[str]] = []

    @classmethod
    def from_options(cls, shared_strings: Sequence[str], options: ConversionOptions) -> SheetRowDecoder:
        return cls(
            shared_strings,
            skip_empty_rows=options.skip_empty_rows,
            trim_trailing_columns=options.trim_trailing_columns,
            text_policy=options.text_policy,
        )

    def start(self, name: str, attrs: Mapping[str, str], empty: bool = False) -> None:
        if name == "row":
            if not empty:
                self.row = []
                self.row_has_cells = False
        elif name == "c":
            self.row_has_cells = True
            if empty:
                reference = attrs.get("r")
                target = column_index(reference) if reference is not None else None
                place_cell(self.row, target, "")
                return
            self._begin_cell(attrs)
        elif empty:
            return
        elif name == "v":
            self.in_value = True
        elif name == "is":
            self.in_inline = True
        elif name == "rPh":
            self.in_phonetic = True

    def end(self, name: str) -> None:
        if name == "row":
            self._end_row()
        elif name == "c":
            self._end_cell()
        elif name == "v":
            self.in_value = False
        elif name == "is":
            self.in_inline = False
        elif name == "rPh":
            self.in_phonetic = False

    def text(self, data: str) -> None:
        if (self.in_value or self.in_inline) and not self.in_phonetic:
            self.value_parts.append(data)

    def drain(self) -> Iterator[list[str]]:
        pending, self._pending = self._pending, []
        yield from pending

    def _begin_cell(self, attrs: Mapping[str, str]) -> None:
        self.value_parts = []
        self.cell_type = CellType.from_attribute(attrs.get("t"))
        reference = attrs.get("r")
        self.column = column_index(reference) if reference is not None else None
        self.in_value = False
        self.in_inline = False
        self.in_phonetic = False

    def _end_cell(self) -> None:
        value = resolve_cell_value(self.cell_type, "".join(self.value_parts), self.shared_strings)
        value = normalize_text(value, self.text_policy)
        place_cell(self.row, self.column, value)
        self.value_parts = []
        self.column = None

    def _end_row(self) -> None:
        # A row element without any cell holds formatting only and is not data.
        if not self.row_has_cells:
            return
        record = finish_row(
            self.row,
            skip_empty=self.skip_empty_rows,
            trim_trailing=self.trim_trailing_columns,
        )
        if record is not None:
            self._pending.append(record)


def iter_sheet_rows(
    reader: PackagePartReader,
    sheet: SheetDescriptor,
    shared_strings: Sequence[str],
    options: ConversionOptions,
) -> Iterator[list[str]]:
    decoder = SheetRowDecoder.from_options(shared_strings, options)
    with reader.open_part(sheet.part_path) as stream:
        try:
            for _ in feed_events(stream, decoder, part_name=sheet.part_path):
                yield from decoder.drain()
        except MalformedXmlError as exc:
            raise MalformedXmlError(f"Failed to read sheet {sheet.name!r}: {exc}") from exc
