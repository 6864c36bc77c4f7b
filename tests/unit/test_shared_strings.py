from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest

from xlsxcsv.core.errors import MalformedXmlError
from xlsxcsv.infrastructure.ooxml.shared_strings import (
    SharedStringsDecoder,
    load_shared_strings,
    parse_shared_strings,
)
from xlsxcsv.infrastructure.package.part_reader import PackagePartReader


def _parse(xml: str) -> tuple[str, ...]:
    return parse_shared_strings(io.BytesIO(xml.encode("utf-8")))


def test_rich_text_runs_concatenate_and_phonetics_are_dropped() -> None:
    strings = _parse(
        """<?xml version="1.0" encoding="UTF-8"?>
<sst xmlns="http://schemas.openxmlformats.org/spreadsheetml/2006/main">
<si><t>Plain</t></si>
<si><r><rPr><b/></rPr><t>Bold</t></r><r><t xml:space="preserve"> tail</t></r></si>
<si><t>漢字</t><rPh sb="0" eb="2"><t>かんじ</t></rPh></si>
<si><t><![CDATA[a<b]]></t></si>
<si><t/></si>
<si/>
<si><t>last &amp; final</t></si>
</sst>"""
    )
    assert strings == ("Plain", "Bold tail", "漢字", "a<b", "", "", "last & final")


def test_namespace_prefixed_tags_are_recognised() -> None:
    strings = _parse(
        '<x:sst xmlns:x="http://schemas.openxmlformats.org/spreadsheetml/2006/main">'
        "<x:si><x:t>one</x:t></x:si><x:si><x:t>two</x:t><x:rPh><x:t>hint</x:t></x:rPh></x:si></x:sst>"
    )
    assert strings == ("one", "two")


def test_decoder_can_be_driven_without_xml() -> None:
    decoder = SharedStringsDecoder()
    decoder.text("outside")
    decoder.start("si", {})
    decoder.start("t", {})
    decoder.text("in")
    decoder.text("side")
    decoder.end("t")
    decoder.start("rPh", {})
    decoder.text("skip")
    decoder.end("rPh")
    decoder.end("si")
    decoder.start("si", {}, empty=True)
    assert decoder.strings == ["inside", ""]


def test_malformed_shared_strings_raise() -> None:
    with pytest.raises(MalformedXmlError, match="sharedStrings"):
        _parse("<sst><si><t>open</si></sst>")


def test_truncated_shared_strings_raise() -> None:
    with pytest.raises(MalformedXmlError):
        _parse("<sst><si><t>cut")


def test_missing_part_yields_empty_table(tmp_path: Path) -> None:
    source = tmp_path / "bare.xlsx"
    with zipfile.ZipFile(source, "w") as archive:
        archive.writestr("xl/workbook.xml", "<workbook/>")

    with PackagePartReader.open(source) as reader:
        assert load_shared_strings(reader) == ()
