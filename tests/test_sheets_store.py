import pytest

from sheetsync import (SheetSyncEngine, ArchiveWriter, CellStyle, NotFound, AlreadyExists, StoreError)
from sheetsync.archive import HEADER_MARKER
from sheetsync.sheets import GoogleSheetsTableStore

from conftest import FIXED_NOW
from fakesheets import FakeSheetsService, http_error

@pytest.fixture
def service():
    s = FakeSheetsService()
    s.add("Control", [["Tables"], ["A"], ["B"]])
    s.add("Archive")
    s.add("A", [["id", "name", "qty", "who", "status"], [1, "alpha", None, None, "B"]])
    s.add("C", [["id", "name"], [7, "gamma"], [8, "delta"]])
    return s

@pytest.fixture
def gstore(service):
    return GoogleSheetsTableStore(service.spreadsheet_id, service)

def test_requires_id():
    with pytest.raises(ValueError):
        GoogleSheetsTableStore("")

def test_list_tables_in_tab_order(gstore):
    assert(gstore.list_tables() == ["Control", "Archive", "A", "C"])
    assert(gstore.has_table("C"))
    assert(not gstore.has_table("Nope"))

def test_create_table_goes_last(gstore, service):
    gstore.create_table("New")
    assert(service.batches[-1] == [{"addSheet": {"properties": {"title": "New", "index": 4}}}])
    assert(service.titles()[-1] == "New")
    with pytest.raises(AlreadyExists):
        gstore.create_table("New")

def test_create_table_lost_race(service):
    class StaleStore(GoogleSheetsTableStore):
        def _sheets(self):
            return [p for p in super()._sheets() if p.title != "C"]

    with pytest.raises(AlreadyExists):
        StaleStore(service.spreadsheet_id, service).create_table("C")

def test_delete_table(gstore, service):
    sheet_id = service.sheets[3]["properties"]["sheetId"]
    gstore.delete_table("C")
    assert(service.batches[-1] == [{"deleteSheet": {"sheetId": sheet_id}}])
    assert("C" not in service.titles())
    with pytest.raises(NotFound):
        gstore.delete_table("C")

def test_get_rows(gstore):
    rows = gstore.get_rows("C")
    assert([[c.to_python() for c in r] for r in rows] == [["id", "name"], [7, "gamma"], [8, "delta"]])
    assert(gstore.row_count("Archive") == 0)
    assert(gstore.get_row("A", 2)[4].as_text() == "B")

def test_missing_table_is_not_found(gstore):
    with pytest.raises(NotFound):
        gstore.get_rows("Nope")
    with pytest.raises(NotFound):
        gstore.append_row("Nope", ["x"])

def test_wrong_spreadsheet(service):
    with pytest.raises(NotFound):
        GoogleSheetsTableStore("other", service).list_tables()

def test_append_rows_single_batch(gstore, service):
    index = gstore.append_rows("C", [[9, "eps"], [10, "zeta"]],
                               [[CellStyle("#cfe2f3"), CellStyle()], [CellStyle(bold=True), CellStyle()]])
    assert(index == 4)
    batch = service.batches[-1]
    assert(len(batch) == 1)
    update = batch[0]["updateCells"]
    assert(update["start"] == {"sheetId": service.sheets[3]["properties"]["sheetId"], "rowIndex": 3, "columnIndex": 0})
    assert(update["fields"].startswith("userEnteredValue"))
    assert(service.values("C")[3:] == [[9, "eps"], [10, "zeta"]])
    styles = gstore.get_cell_styles("C")
    assert(styles[3][0].background == "#cfe2f3")
    assert(styles[4][0].bold)

def test_append_grows_grid(service):
    service.add("Small", [["h"]], rows=2, cols=2)
    store = GoogleSheetsTableStore(service.spreadsheet_id, service)
    assert(store.append_rows("Small", [[1, 2, 3, 4], [5], [6]]) == 2)
    kinds = [list(r.keys())[0] for r in service.batches[-1]]
    assert(kinds == ["appendDimension", "appendDimension", "updateCells"])
    assert(service.batches[-1][0]["appendDimension"]["dimension"] == "ROWS")
    assert(service.batches[-1][0]["appendDimension"]["length"] == 2)
    assert(service.batches[-1][1]["appendDimension"]["length"] == 2)
    assert(service.values("Small") == [["h"], [1, 2, 3, 4], [5], [6]])

def test_failed_batch_changes_nothing(gstore, service):
    before = service.values("C")
    service.fail_next_batch = http_error(500, "Internal error encountered.")
    with pytest.raises(StoreError) as e:
        gstore.append_rows("C", [[9, "eps"]])
    assert(not isinstance(e.value, NotFound))
    assert(service.values("C") == before)

def test_delete_row(gstore, service):
    gstore.delete_row("C", 2)
    rng = service.batches[-1][0]["deleteDimension"]["range"]
    assert((rng["dimension"], rng["startIndex"], rng["endIndex"]) == ("ROWS", 1, 2))
    assert(service.values("C") == [["id", "name"], [8, "delta"]])
    with pytest.raises(IndexError):
        gstore.delete_row("C", 3)

def test_write_row_clears_old_cells(gstore, service):
    gstore.write_row("A", 2, ["only"])
    assert(service.values("A") == [["id", "name", "qty", "who", "status"], ["only"]])

def test_write_row_past_grid(service):
    service.add("Small", [["h"]], rows=2, cols=2)
    store = GoogleSheetsTableStore(service.spreadsheet_id, service)
    store.write_row("Small", 4, ["x", "y", "z"])
    assert(service.values("Small") == [["h"], [], [], ["x", "y", "z"]])
    with pytest.raises(IndexError):
        store.write_row("Small", 0, ["x"])

def test_dates_round_trip(gstore, service):
    gstore.append_row("Archive", [FIXED_NOW, FIXED_NOW.date(), 2.5])
    cell = service.cell("Archive", 0, 0)
    assert(cell["userEnteredFormat"]["numberFormat"]["type"] == "DATE_TIME")
    row = gstore.get_rows("Archive")[0]
    assert(row[0].value == FIXED_NOW)
    assert(row[1].value == FIXED_NOW.date())
    assert(row[2].value == 2.5)

def test_archive_blocks_are_separated(gstore, service, clock):
    writer = ArchiveWriter(gstore, "Archive", clock)
    first = writer.archive("C")
    second = writer.archive("A")
    assert(first.start_row == 1)
    # C block is header + 3 rows + blank
    assert(second.start_row == 6)
    values = service.values("Archive")
    assert(values[0][1:] == ["C", HEADER_MARKER])
    assert(values[4] == [])
    assert(values[5][1:] == ["A", HEADER_MARKER])
    assert(gstore.get_cell_styles("Archive")[0][0].bold)

def test_dispatch_edit(gstore):
    seen = []
    gstore.on_cell_changed(seen.append)
    event = gstore.dispatch_edit({"sheetName": "A", "rowStart": 2, "columnStart": 5, "value": "B"})
    assert(seen == [event])
    assert(event.table == "A" and event.row == 2 and event.column == 5)

def test_engine_against_sheets(gstore, service, config, notifier, clock):
    engine = SheetSyncEngine(gstore, config, notifier, clock)
    engine.start()
    result = engine.sync_now()
    assert(result.created == ["B"] and result.deleted == ["C"])
    assert(service.titles() == ["Control", "Archive", "A", "B"])
    assert(service.values("Archive")[1:4] == [["id", "name"], [7, "gamma"], [8, "delta"]])

    # status of A row 2 was set to B in the spreadsheet
    gstore.dispatch_edit({"sheetName": "A", "rowStart": 2, "columnStart": 5, "value": "B"})
    assert(service.values("B") == [[1, "alpha", None, None, "B"]])
    assert(service.values("A") == [["id", "name", "qty", "who", "status"]])
    assert(len(notifier) == 0)
