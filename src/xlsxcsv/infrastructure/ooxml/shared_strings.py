from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import IO

from xlsxcsv.infrastructure.ooxml.xml_events import feed_events
from xlsxcsv.infrastructure.package.part_reader import SHARED_STRINGS_PART, PackagePartReader

logger = logging.getLogger(__name__)


class SharedStringsDecoder:
    """Collects one string per ``si`` entry, concatenating rich-text runs.

    Phonetic hints (``rPh``) sit inside an entry but are not part of its value.
    """

    def __init__(self) -> None:
        self.strings: list[str] = []
        self._parts: list[str] = []
        self._in_entry = False
        self._in_phonetic = False

    def start(self, name: str, attrs: Mapping[str, str], empty: bool = False) -> None:
        if name == "si":
            self._parts = []
            self._in_entry = True
            if empty:
                self.end(name)
        elif name == "rPh" and not empty:
            self._in_phonetic = True

    def end(self, name: str) -> None:
        if name == "si":
            if self._in_entry:
                self.strings.append("".join(self._parts))
            self._parts = []
            self._in_entry = False
        elif name == "rPh":
            self._in_phonetic = False

    def text(self, data: str) -> None:
        if self._in_entry and not self._in_phonetic:
            self._parts.append(data)


def parse_shared_strings(stream: IO[bytes], *, part_name: str = SHARED_STRINGS_PART) -> tuple[str, ...]:
    decoder = SharedStringsDecoder()
    for _ in feed_events(stream, decoder, part_name=part_name):
        pass
    return tuple(decoder.strings)


def load_shared_strings(reader: PackagePartReader) -> tuple[str, ...]:
    stream = reader.open_optional_part(SHARED_STRINGS_PART)
    if stream is None:
        return ()
    with stream:
        strings = parse_shared_strings(stream)
    logger.debug("Loaded %d shared strings", len(strings))
    return strings
