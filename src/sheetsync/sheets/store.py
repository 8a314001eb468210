import logging

from ..store import TableStore
from ..cells import CellValue, CellStyle, Row, row_width
from ..events import CellChangedEvent
from ..errors import StoreError, NotFound, AlreadyExists
from ..access import gws
from .resources import SheetProperties, sheet_properties
from .requests import (AddSheetRequest, DeleteSheetRequest, AppendDimensionRequest,
                       DeleteDimensionRequest, UpdateCellsRequest)
from .convert import READ_FIELDS, WRITE_FIELDS, grid_to_rows, row_to_data
from . import ops

logger = logging.getLogger(__name__)

class GoogleSheetsTableStore(TableStore):
    """
    Table store on top of one Google Sheets spreadsheet, a table being a
    sheet (tab) of it.

    Each mutating call is a single batchUpdate, which the API applies as a
    whole or not at all, so an archive block or a grown-and-written row never
    shows up half done.  Nothing is cached between calls: every operation
    reads the sheet list fresh because people edit the spreadsheet by hand.

    The API has no push notifications for cell edits.  Something outside
    (an Apps Script onEdit trigger posting to a web hook, say) has to hand
    them over through dispatch_edit().
    """
    def __init__(self, spreadsheet_id: str, service=None) -> None:
        super().__init__()
        if not spreadsheet_id:
            raise ValueError("spreadsheet_id is required")
        self._spreadsheet_id = spreadsheet_id
        self._service = service

    def __repr__(self) -> str:
        return f"{self.__class__}:{self._spreadsheet_id}"

    @property
    def spreadsheet_id(self) -> str:
        return self._spreadsheet_id

    @property
    def service(self):
        if self._service is None:
            self._service = gws.get_service("sheets", "v4")
            if self._service is None:
                raise StoreError("not connected to Google Sheets, check credentials")
        return self._service

    def _sheets(self) -> list[SheetProperties]:
        return [sheet_properties(s) for s in ops.get_sheets(self.service, self._spreadsheet_id)]

    def _properties(self, name: str) -> SheetProperties:
        for p in self._sheets():
            if p.title == name:
                return p
        raise NotFound(name)

    def _update(self, name: str, requests: list) -> dict:
        return ops.batchUpdate(self.service, self._spreadsheet_id, requests, table=name)

    def _read(self, name: str) -> tuple[list[Row], list[list[CellStyle]]]:
        sheet = ops.get_grid(self.service, self._spreadsheet_id, name, READ_FIELDS)
        return grid_to_rows(sheet)

    def _grow(self, props: SheetProperties, rows: int, cols: int) -> list:
        """Requests to make the grid at least rows x cols"""
        requests = []
        if rows > props.rows:
            requests.append(AppendDimensionRequest(props.sheetId, "ROWS", rows - props.rows))
        if cols > props.cols:
            requests.append(AppendDimensionRequest(props.sheetId, "COLUMNS", cols - props.cols))
        return requests

    # tables

    def list_tables(self) -> list[str]:
        return [p.title for p in self._sheets()]

    def create_table(self, name: str) -> None:
        if not name:
            raise ValueError("table name must not be empty")
        sheets = self._sheets()
        if any(p.title == name for p in sheets):
            raise AlreadyExists(name)
        try:
            self._update(name, [AddSheetRequest(name, len(sheets))])
        except StoreError as e:
            # lost a race with somebody adding it by hand
            if "already exists" in str(e):
                raise AlreadyExists(name) from e
            raise
        logger.debug("added sheet %s", name)

    def delete_table(self, name: str) -> None:
        props = self._properties(name)
        self._update(name, [DeleteSheetRequest(props.sheetId)])
        logger.debug("deleted sheet %s", name)

    # rows

    def get_rows(self, name: str) -> list[Row]:
        return self._read(name)[0]

    def get_cell_styles(self, name: str) -> list[list[CellStyle]]:
        return self._read(name)[1]

    def append_rows(self, name: str, rows: list[Row],
                    styles: list[list[CellStyle]]|None = None) -> int:
        props = self._properties(name)
        if styles is not None and len(styles) != len(rows):
            raise ValueError("styles must have one entry per row")
        if not rows:
            return self.row_count(name) + 1
        existing = self.row_count(name)
        data = [row_to_data([CellValue.of(c) for c in r], styles[i] if styles is not None else None)
                for i, r in enumerate(rows)]
        requests = self._grow(props, existing + len(rows), row_width(rows))
        requests.append(UpdateCellsRequest(props.sheetId, existing, 0, data, WRITE_FIELDS))
        self._update(name, requests)
        return existing + 1

    def delete_row(self, name: str, index: int) -> None:
        props = self._properties(name)
        count = self.row_count(name)
        if index < 1 or index > count:
            raise IndexError(f"row {index} out of range for '{name}' ({count} rows)")
        self._update(name, [DeleteDimensionRequest(props.sheetId, "ROWS", index - 1, index)])

    def write_row(self, name: str, index: int, row: Row) -> None:
        if index < 1:
            raise IndexError(f"row {index} out of range for '{name}'")
        props = self._properties(name)
        rows = self.get_rows(name)
        new_row = [CellValue.of(c) for c in row]
        # pad with empties so anything past the new row's end is cleared too
        old_width = len(rows[index - 1]) if index <= len(rows) else 0
        padded = new_row + [CellValue()] * (old_width - len(new_row))
        requests = self._grow(props, index, len(padded))
        requests.append(UpdateCellsRequest(props.sheetId, index - 1, 0, [row_to_data(padded)], WRITE_FIELDS))
        self._update(name, requests)

    # events

    def dispatch_edit(self, payload: dict) -> CellChangedEvent:
        """
        Feed an edit that happened in the spreadsheet to subscribers.
        payload is either CellChangedEvent field names or what an Apps Script
        onEdit trigger forwards, see CellChangedEvent.from_dict().
        """
        event = CellChangedEvent.from_dict(payload)
        self.emit(event)
        return event
