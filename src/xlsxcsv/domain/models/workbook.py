from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum


class CellType(Enum):
    SHARED_STRING = "s"
    INLINE_STRING = "inlineStr"
    BOOLEAN = "b"
    NUMBER = "n"
    ERROR = "e"
    PLAIN_STRING = "str"

    @classmethod
    def from_attribute(cls, raw: str | None) -> CellType:
        """Map a cell ``t`` attribute to its type; absent or unknown means number."""
        if raw is None:
            return cls.NUMBER
        for member in cls:
            if member.value == raw:
                return member
        return cls.NUMBER


@dataclass(frozen=True, slots=True)
class SheetDescriptor:
    name: str
    part_path: str
    state: str = "visible"


@dataclass(frozen=True, slots=True)
class ConversionRun:
    relationships: Mapping[str, str]
    sheets: tuple[SheetDescriptor, ...]
    shared_strings: tuple[str, ...]
