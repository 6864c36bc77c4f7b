from __future__ import annotations

import io
import logging
import sys
import zipfile
from pathlib import Path
from typing import IO, BinaryIO

from xlsxcsv.core.errors import InvalidPackageError, MissingPartError

logger = logging.getLogger(__name__)

WORKBOOK_PART = "xl/workbook.xml"
WORKBOOK_RELS_PART = "xl/_rels/workbook.xml.rels"
SHARED_STRINGS_PART = "xl/sharedStrings.xml"
STDIN_SOURCE = "-"


class PackagePartReader:
    """Read-only access to the named parts of an xlsx package."""

    def __init__(self, archive: zipfile.ZipFile, *, label: str) -> None:
        self._archive = archive
        self.label = label
        self._names = set(archive.namelist())

    @classmethod
    def open(cls, source: str | Path | BinaryIO) -> PackagePartReader:
        if isinstance(source, (str, Path)) and str(source) == STDIN_SOURCE:
            # zipfile needs random access, so stdin is buffered in full.
            payload: str | Path | IO[bytes] = io.BytesIO(sys.stdin.buffer.read())
            label = "<stdin>"
        elif isinstance(source, (str, Path)):
            payload = Path(source)
            label = str(source)
        else:
            payload = source
            label = getattr(source, "name", "<stream>")

        try:
            archive = zipfile.ZipFile(payload, "r")
        except FileNotFoundError as exc:
            raise InvalidPackageError(f"Input file not found: {label}") from exc
        except (zipfile.BadZipFile, OSError) as exc:
            raise InvalidPackageError(f"Not a readable xlsx package: {label} ({exc})") from exc
        logger.debug("Opened package %s with %d parts", label, len(archive.namelist()))
        return cls(archive, label=label)

    def has_part(self, name: str) -> bool:
        return name in self._names

    def open_part(self, name: str) -> IO[bytes]:
        if name not in self._names:
            raise MissingPartError(f"Package {self.label} has no part {name}")
        try:
            return self._archive.open(name, "r")
        except (zipfile.BadZipFile, OSError) as exc:
            raise InvalidPackageError(f"Cannot read part {name} from {self.label}: {exc}") from exc

    def open_optional_part(self, name: str) -> IO[bytes] | None:
        if name not in self._names:
            logger.debug("Optional part %s absent from %s", name, self.label)
            return None
        return self.open_part(name)

    def close(self) -> None:
        self._archive.close()

    def __enter__(self) -> PackagePartReader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
