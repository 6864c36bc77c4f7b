from xlsxcsv.core.config import TextPolicy
from xlsxcsv.domain.models.workbook import CellType
from xlsxcsv.infrastructure.ooxml.cells import column_index, normalize_text, resolve_cell_value


def test_column_index_decodes_letters_base26() -> None:
    assert column_index("A1") == 0
    assert column_index("B3") == 1
    assert column_index("Z1") == 25
    assert column_index("AA1") == 26
    assert column_index("AZ9") == 51
    assert column_index("XFD1048576") == 16383


def test_column_index_is_case_insensitive_and_stops_at_first_digit() -> None:
    assert column_index("c7") == 2
    assert column_index("AB12C") == 27


def test_column_index_without_letters_is_none() -> None:
    assert column_index("17") is None
    assert column_index("") is None
    assert column_index("$A$1") is None


def test_cell_type_defaults_to_number() -> None:
    assert CellType.from_attribute(None) is CellType.NUMBER
    assert CellType.from_attribute("d") is CellType.NUMBER
    assert CellType.from_attribute("s") is CellType.SHARED_STRING
    assert CellType.from_attribute("inlineStr") is CellType.INLINE_STRING
    assert CellType.from_attribute("str") is CellType.PLAIN_STRING
    assert CellType.from_attribute("e") is CellType.ERROR
    assert CellType.from_attribute("b") is CellType.BOOLEAN


def test_shared_string_lookup() -> None:
    table = ("Hello", "World")
    assert resolve_cell_value(CellType.SHARED_STRING, "1", table) == "World"
    assert resolve_cell_value(CellType.SHARED_STRING, " 0 \n", table) == "Hello"
    # Same index twice gives the same string.
    assert resolve_cell_value(CellType.SHARED_STRING, "0", table) == resolve_cell_value(
        CellType.SHARED_STRING, "0", table
    )


def test_shared_string_out_of_range_is_empty() -> None:
    assert resolve_cell_value(CellType.SHARED_STRING, "2", ("a", "b")) == ""
    assert resolve_cell_value(CellType.SHARED_STRING, "99999999999999999999", ()) == ""


def test_shared_string_unparseable_index_passes_raw_text() -> None:
    assert resolve_cell_value(CellType.SHARED_STRING, "abc", ("a",)) == "abc"
    assert resolve_cell_value(CellType.SHARED_STRING, "-1", ("a",)) == "-1"
    assert resolve_cell_value(CellType.SHARED_STRING, "", ("a",)) == ""


def test_boolean_resolution() -> None:
    assert resolve_cell_value(CellType.BOOLEAN, "1", ()) == "true"
    assert resolve_cell_value(CellType.BOOLEAN, " 0 ", ()) == "false"
    assert resolve_cell_value(CellType.BOOLEAN, "TRUE", ()) == "TRUE"


def test_string_and_number_types_keep_raw_text() -> None:
    assert resolve_cell_value(CellType.INLINE_STRING, "  padded ", ()) == "  padded "
    assert resolve_cell_value(CellType.PLAIN_STRING, "x\ny", ()) == "x\ny"
    assert resolve_cell_value(CellType.ERROR, "#DIV/0!", ()) == "#DIV/0!"
    assert resolve_cell_value(CellType.NUMBER, "1.0000000000000001E-3", ()) == "1.0000000000000001E-3"


def test_escape_policy_rewrites_control_characters() -> None:
    assert normalize_text("a\r\nb\tc", TextPolicy.ESCAPE) == "a\\r\\nb\\tc"


def test_escape_policy_does_not_touch_backslashes() -> None:
    once = normalize_text("C:\\temp\\new\nline", TextPolicy.ESCAPE)
    assert once == "C:\\temp\\new\\nline"
    assert normalize_text(once, TextPolicy.ESCAPE) == once


def test_space_policy_and_preserve() -> None:
    assert normalize_text("a\r\nb\tc", TextPolicy.SPACE) == "a  b c"
    assert normalize_text("a\nb", TextPolicy.PRESERVE) == "a\nb"
