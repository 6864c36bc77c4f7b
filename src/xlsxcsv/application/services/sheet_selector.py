from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from xlsxcsv.core.config import SheetSelection
from xlsxcsv.core.errors import (
    ConfigurationError,
    NamedSheetNotFoundError,
    NoMatchError,
    SheetIndexOutOfRangeError,
)
from xlsxcsv.domain.models.workbook import SheetDescriptor

logger = logging.getLogger(__name__)


def _compile(patterns: Sequence[str]) -> list[re.Pattern[str]]:
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise ConfigurationError(f"Invalid sheet pattern {pattern!r}: {exc}") from exc
    return compiled


def select_sheets(
    sheets: Sequence[SheetDescriptor],
    selection: SheetSelection,
) -> list[SheetDescriptor]:
    """Pick the sheets to convert, in catalog order.

    An exact name wins over an index, which wins over the all-sheets and
    pattern filters. Patterns are unanchored regular expressions.
    """
    if selection.sheet_name is not None:
        named = [sheet for sheet in sheets if sheet.name == selection.sheet_name]
        if not named:
            raise NamedSheetNotFoundError(f"Cannot find sheet named '{selection.sheet_name}'")
        return named

    if selection.sheet_index is not None:
        index = selection.sheet_index
        if index < 1 or index > len(sheets):
            raise SheetIndexOutOfRangeError(f"Sheet index {index} out of range (1-{len(sheets)})")
        return [sheets[index - 1]]

    targets = list(sheets) if selection.all_sheets else list(sheets[:1])

    if selection.include_patterns:
        include = _compile(selection.include_patterns)
        targets = [sheet for sheet in targets if any(p.search(sheet.name) for p in include)]

    if selection.exclude_patterns:
        exclude = _compile(selection.exclude_patterns)
        targets = [sheet for sheet in targets if not any(p.search(sheet.name) for p in exclude)]

    if not targets:
        raise NoMatchError("No sheets found matching criteria")
    logger.debug("Selected sheets: %s", [sheet.name for sheet in targets])
    return targets
