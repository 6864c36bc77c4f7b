from __future__ import annotations

import logging
import zipfile
import zlib
from collections.abc import Mapping
from typing import IO
from xml.etree import ElementTree as ET

from xlsxcsv.core.errors import EmptyWorkbookError, InvalidPackageError, MalformedXmlError
from xlsxcsv.domain.models.workbook import SheetDescriptor
from xlsxcsv.infrastructure.ooxml.xml_events import attribute, local_name
from xlsxcsv.infrastructure.package.part_reader import WORKBOOK_PART, PackagePartReader

logger = logging.getLogger(__name__)

PART_ROOT = "xl/"


def normalize_sheet_path(target: str) -> str:
    cleaned = target.lstrip("/")
    if cleaned.startswith(PART_ROOT):
        return cleaned
    return PART_ROOT + cleaned


def parse_sheet_catalog(
    stream: IO[bytes],
    relationships: Mapping[str, str],
    *,
    part_name: str = WORKBOOK_PART,
) -> tuple[SheetDescriptor, ...]:
    sheets: list[SheetDescriptor] = []
    try:
        for _event, node in ET.iterparse(stream, events=("start",)):
            if local_name(node.tag) != "sheet":
                continue
            name = node.get("name")
            rel_id = attribute(node.attrib, "id")
            if name is None or rel_id is None:
                continue
            target = relationships.get(rel_id)
            if target is None:
                logger.debug("Sheet %r references unknown relationship %s; skipping", name, rel_id)
                continue
            sheets.append(
                SheetDescriptor(
                    name=name,
                    part_path=normalize_sheet_path(target),
                    state=node.get("state") or "visible",
                )
            )
    except ET.ParseError as exc:
        raise MalformedXmlError(f"Malformed XML in {part_name}: {exc}") from exc
    except (zipfile.BadZipFile, zlib.error) as exc:
        raise InvalidPackageError(f"Corrupt package data in {part_name}: {exc}") from exc
    return tuple(sheets)


def load_sheet_catalog(
    reader: PackagePartReader,
    relationships: Mapping[str, str],
) -> tuple[SheetDescriptor, ...]:
    with reader.open_part(WORKBOOK_PART) as stream:
        sheets = parse_sheet_catalog(stream, relationships)
    if not sheets:
        raise EmptyWorkbookError(f"No sheets found in workbook {reader.label}")
    logger.debug("Workbook declares %d sheets: %s", len(sheets), [sheet.name for sheet in sheets])
    return sheets
