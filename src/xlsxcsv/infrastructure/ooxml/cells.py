from __future__ import annotations

import re
from collections.abc import Sequence

from xlsxcsv.core.config import TextPolicy
from xlsxcsv.domain.models.workbook import CellType

_SHARED_INDEX_RE = re.compile(r"\+?[0-9]+")
_ESCAPES = str.maketrans({"\r": "\\r", "\n": "\\n", "\t": "\\t"})
_SPACES = str.maketrans({"\r": " ", "\n": " ", "\t": " "})


def column_index(cell_ref: str) -> int | None:
    """Zero-based column of a cell reference such as ``C7``.

    Only the leading run of ASCII letters counts; ``None`` when there is none.
    """
    total = 0
    seen_letter = False
    for ch in cell_ref:
        if not ("A" <= ch <= "Z" or "a" <= ch <= "z"):
            break
        seen_letter = True
        total = total * 26 + (ord(ch.upper()) - ord("A") + 1)
    if not seen_letter:
        return None
    return total - 1


def resolve_cell_value(cell_type: CellType, raw: str, shared_strings: Sequence[str]) -> str:
    if cell_type is CellType.SHARED_STRING:
        candidate = raw.strip()
        if not _SHARED_INDEX_RE.fullmatch(candidate):
            return raw
        index = int(candidate)
        if index < len(shared_strings):
            return shared_strings[index]
        return ""
    if cell_type is CellType.BOOLEAN:
        flag = raw.strip()
        if flag == "1":
            return "true"
        if flag == "0":
            return "false"
        return flag
    return raw


def normalize_text(value: str, policy: TextPolicy) -> str:
    if policy is TextPolicy.ESCAPE:
        return value.translate(_ESCAPES)
    if policy is TextPolicy.SPACE:
        return value.translate(_SPACES)
    return value
