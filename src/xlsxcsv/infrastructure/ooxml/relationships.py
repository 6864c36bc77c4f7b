from __future__ import annotations

import logging
import zipfile
import zlib
from types import MappingProxyType
from typing import IO
from xml.etree import ElementTree as ET

from xlsxcsv.core.errors import InvalidPackageError, MalformedXmlError
from xlsxcsv.infrastructure.ooxml.xml_events import local_name
from xlsxcsv.infrastructure.package.part_reader import WORKBOOK_RELS_PART, PackagePartReader

logger = logging.getLogger(__name__)


def parse_relationships(stream: IO[bytes], *, part_name: str = WORKBOOK_RELS_PART) -> dict[str, str]:
    mapping: dict[str, str] = {}
    try:
        for _event, node in ET.iterparse(stream, events=("start",)):
            if local_name(node.tag) != "Relationship":
                continue
            rel_id = node.get("Id")
            target = node.get("Target")
            if rel_id is None or target is None:
                continue
            mapping[rel_id] = target
    except ET.ParseError as exc:
        raise MalformedXmlError(f"Malformed XML in {part_name}: {exc}") from exc
    except (zipfile.BadZipFile, zlib.error) as exc:
        raise InvalidPackageError(f"Corrupt package data in {part_name}: {exc}") from exc
    return mapping


def load_relationships(reader: PackagePartReader) -> MappingProxyType[str, str]:
    """Read the workbook relationship part; a package without one has no relationships."""
    stream = reader.open_optional_part(WORKBOOK_RELS_PART)
    if stream is None:
        return MappingProxyType({})
    with stream:
        mapping = parse_relationships(stream)
    logger.debug("Loaded %d workbook relationships", len(mapping))
    return MappingProxyType(mapping)
