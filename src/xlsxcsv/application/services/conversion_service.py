from __future__ import annotations

import logging
from dataclasses import dataclass, field

from xlsxcsv.application.services.sheet_selector import select_sheets
from xlsxcsv.core.config import ConversionOptions
from xlsxcsv.core.errors import MissingPartError
from xlsxcsv.domain.models.workbook import ConversionRun, SheetDescriptor
from xlsxcsv.infrastructure.ooxml.relationships import load_relationships
from xlsxcsv.infrastructure.ooxml.shared_strings import load_shared_strings
from xlsxcsv.infrastructure.ooxml.sheet_decoder import iter_sheet_rows
from xlsxcsv.infrastructure.ooxml.workbook import load_sheet_catalog
from xlsxcsv.infrastructure.package.part_reader import PackagePartReader
from xlsxcsv.infrastructure.sinks.csv_sink import CsvRecordSink

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SheetSummary:
    name: str
    part_path: str
    rows_written: int


@dataclass(slots=True)
class ConversionSummary:
    sheets: list[SheetSummary] = field(default_factory=list)

    @property
    def rows_written(self) -> int:
        return sum(sheet.rows_written for sheet in self.sheets)


class ConversionService:
    def __init__(self, reader: PackagePartReader, options: ConversionOptions) -> None:
        self.reader = reader
        self.options = options
        self._run: ConversionRun | None = None

    def load_run(self) -> ConversionRun:
        if self._run is None:
            relationships = load_relationships(self.reader)
            sheets = load_sheet_catalog(self.reader, relationships)
            shared_strings = load_shared_strings(self.reader)
            self._run = ConversionRun(
                relationships=relationships,
                sheets=sheets,
                shared_strings=shared_strings,
            )
        return self._run

    def selected_sheets(self) -> list[SheetDescriptor]:
        return select_sheets(self.load_run().sheets, self.options.selection)

    def convert(self, sink: CsvRecordSink) -> ConversionSummary:
        run = self.load_run()
        targets = self.selected_sheets()
        summary = ConversionSummary()

        for position, sheet in enumerate(targets):
            if position > 0 and self.options.sheet_delimiter:
                sink.write_record([self.options.sheet_delimiter])
            summary.sheets.append(self._convert_sheet(run, sheet, sink))

        sink.flush()
        return summary

    def _convert_sheet(self, run: ConversionRun, sheet: SheetDescriptor, sink: CsvRecordSink) -> SheetSummary:
        if not self.reader.has_part(sheet.part_path):
            raise MissingPartError(f"Failed to read sheet {sheet.name!r}: part {sheet.part_path} is missing")

        logger.info("Converting sheet %r (%s)", sheet.name, sheet.part_path)
        rows_written = 0
        for record in iter_sheet_rows(self.reader, sheet, run.shared_strings, self.options):
            sink.write_record(record)
            rows_written += 1
        logger.info("Sheet %r: %d rows written", sheet.name, rows_written)
        return SheetSummary(name=sheet.name, part_path=sheet.part_path, rows_written=rows_written)
