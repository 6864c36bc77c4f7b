from xlsxcsv.infrastructure.ooxml.rows import finish_row, place_cell


def test_place_cell_pads_gaps_with_empty_strings() -> None:
    row: list[str] = []
    place_cell(row, 2, "c")
    assert row == ["", "", "c"]
    place_cell(row, 0, "a")
    assert row == ["a", "", "c"]
    place_cell(row, 5, "f")
    assert row == ["a", "", "c", "", "", "f"]


def test_place_cell_without_column_appends() -> None:
    row = ["a"]
    place_cell(row, None, "b")
    place_cell(row, None, "c")
    assert row == ["a", "b", "c"]


def test_row_length_tracks_highest_column() -> None:
    row: list[str] = []
    for column in (3, 1, 7, 2):
        place_cell(row, column, "x")
    assert len(row) == 8


def test_finish_row_skips_only_exactly_empty_rows() -> None:
    assert finish_row(["", "", ""], skip_empty=True, trim_trailing=False) is None
    assert finish_row(["", " ", " "], skip_empty=True, trim_trailing=False) == ["", " ", " "]
    assert finish_row(["", ""], skip_empty=False, trim_trailing=False) == ["", ""]


def test_finish_row_trims_trailing_but_not_interior_empties() -> None:
    row = ["a", "", "b", "", ""]
    assert finish_row(row, skip_empty=False, trim_trailing=True) == ["a", "", "b"]
    assert row == ["a", "", "b", "", ""]


def test_empty_row_test_runs_before_trim() -> None:
    assert finish_row(["", ""], skip_empty=False, trim_trailing=True) == []
    assert finish_row(["", ""], skip_empty=True, trim_trailing=True) is None
