from __future__ import annotations

import zipfile
from collections.abc import Callable
from pathlib import Path
from xml.sax.saxutils import escape

import pytest

MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PKG_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
WORKSHEET_TYPE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/worksheet"


def worksheet_xml(rows: str) -> str:
    return f"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<worksheet xmlns="{MAIN_NS}">
  <sheetData>{rows}</sheetData>
</worksheet>
"""


def shared_strings_xml(strings: list[str]) -> str:
    items = "".join(f"<si><t>{escape(value)}</t></si>" for value in strings)
    return f"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<sst xmlns="{MAIN_NS}" count="{len(strings)}" uniqueCount="{len(strings)}">{items}</sst>
"""


def workbook_xml(names: list[str]) -> str:
    sheets = "".join(
        f'<sheet name="{escape(name)}" sheetId="{idx}" r:id="rId{idx}"/>' for idx, name in enumerate(names, start=1)
    )
    return f"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<workbook xmlns="{MAIN_NS}" xmlns:r="{REL_NS}"><sheets>{sheets}</sheets></workbook>
"""


def workbook_rels_xml(count: int) -> str:
    rels = "".join(
        f'<Relationship Id="rId{idx}" Type="{WORKSHEET_TYPE}" Target="worksheets/sheet{idx}.xml"/>'
        for idx in range(1, count + 1)
    )
    return f"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="{PKG_REL_NS}">{rels}</Relationships>
"""


def build_xlsx(
    path: Path,
    sheets: list[tuple[str, str]],
    shared_strings: list[str] | None = None,
) -> Path:
    """Write a minimal package; ``sheets`` holds (name, sheetData rows xml) pairs."""
    names = [name for name, _rows in sheets]
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("xl/workbook.xml", workbook_xml(names))
        archive.writestr("xl/_rels/workbook.xml.rels", workbook_rels_xml(len(sheets)))
        if shared_strings is not None:
            archive.writestr("xl/sharedStrings.xml", shared_strings_xml(shared_strings))
        for idx, (_name, rows) in enumerate(sheets, start=1):
            archive.writestr(f"xl/worksheets/sheet{idx}.xml", worksheet_xml(rows))
    return path


@pytest.fixture
def make_xlsx(tmp_path: Path) -> Callable[..., Path]:
    def factory(
        sheets: list[tuple[str, str]],
        shared_strings: list[str] | None = None,
        name: str = "book.xlsx",
    ) -> Path:
        return build_xlsx(tmp_path / name, sheets, shared_strings)

    return factory
