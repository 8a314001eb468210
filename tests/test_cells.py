import datetime

import pytest

from sheetsync.cells import CellKind, CellValue, CellStyle, make_row, is_blank_row, row_width

def test_of():
    assert(CellValue.of(None).kind == CellKind.EMPTY)
    assert(CellValue.of("").is_empty)
    assert(CellValue.of("x") == CellValue.text("x"))
    assert(CellValue.of(3).kind == CellKind.NUMBER)
    assert(CellValue.of(2.5).value == 2.5)
    assert(CellValue.of(True) == CellValue.text("TRUE"))
    d = datetime.date(2024, 1, 2)
    assert(CellValue.of(d) == CellValue.date(d))
    v = CellValue.text("same")
    assert(CellValue.of(v) is v)

def test_variant_checks():
    with pytest.raises(ValueError):
        CellValue(CellKind.NUMBER, "3")
    with pytest.raises(ValueError):
        CellValue(CellKind.TEXT, 3)
    with pytest.raises(ValueError):
        CellValue(CellKind.EMPTY, "x")
    with pytest.raises(ValueError):
        CellValue(CellKind.NUMBER, True)

def test_as_text():
    assert(CellValue.number(3.0).as_text() == "3")
    assert(CellValue.number(3.25).as_text() == "3.25")
    assert(CellValue().as_text() == "")
    assert(CellValue.date(datetime.datetime(2024, 1, 2, 3, 4, 5)).as_text() == "2024-01-02 03:04:05")
    assert(str(CellValue.text("Shipped")) == "Shipped")
    assert(not CellValue())
    assert(CellValue.text("x"))

def test_rows():
    row = make_row(["a", None, 2])
    assert([c.kind for c in row] == [CellKind.TEXT, CellKind.EMPTY, CellKind.NUMBER])
    assert(is_blank_row([]))
    assert(is_blank_row(make_row([None, ""])))
    assert(not is_blank_row(row))
    assert(row_width([row, [], make_row([1])]) == 3)
    assert(row_width([]) == 0)

def test_style():
    s = CellStyle("#FFAA00", True)
    assert(s.background == "#ffaa00")
    assert(CellStyle("00ff00").background == "#00ff00")
    assert(CellStyle().is_default)
    assert(not s.is_default)
    with pytest.raises(ValueError):
        CellStyle("red")
