from __future__ import annotations


def place_cell(row: list[str], column: int | None, value: str) -> None:
    if column is None:
        row.append(value)
        return
    shortfall = column + 1 - len(row)
    if shortfall > 0:
        row.extend([""] * shortfall)
    row[column] = value


def finish_row(row: list[str], *, skip_empty: bool, trim_trailing: bool) -> list[str] | None:
    """Return the record to emit for ``row``, or ``None`` when it is skipped.

    The empty-row test looks at the whole row before any trimming and only an
    exact ``""`` counts as empty.
    """
    if skip_empty and all(cell == "" for cell in row):
        return None
    record = list(row)
    if trim_trailing:
        while record and record[-1] == "":
            record.pop()
    return record
