from dataclasses import dataclass, field
import re

from ..resources import SheetSyncResourceBase
from .resources import DimensionRange, GridCoordinate

class GoogleSheetsUpdateRequestBase(SheetSyncResourceBase):
    """
    Base class for sheet batchUpdate requests to get the actual
    request dict into the right format.  The key of the request is
    derived from the class name, so AddSheetRequest becomes 'addSheet'.
    """
    def to_request(self) -> dict[str,dict]:
        name = self.__class__.__name__
        # strip off the trailing 'Request' and lower case the first letter
        m = re.match("^([a-zA-Z])([a-zA-Z]+)Request$", name)
        if not m:
            raise RuntimeError("Invalid Google Sheets request format for class name")
        key = m.group(1).lower() + m.group(2)
        return {key: self.to_base()}

@dataclass
class AddSheetRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#addsheetrequest
    Only title and index are ever needed here, the API fills in the rest.
    """
    title: str
    index: int|None = field(default=None)

    def to_base(self) -> dict:
        props = {'title': self.title}
        if self.index is not None:
            props['index'] = self.index
        return {'properties': props}

@dataclass
class DeleteSheetRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#deletesheetrequest
    """
    sheetId: int

@dataclass
class AppendDimensionRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#appenddimensionrequest
    """
    sheetId: int
    dimension: str
    length: int

@dataclass
class DeleteDimensionRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#deletedimensionrequest
    The 'range' indirection makes this a bit complicated, we want the DimensionRange
    initializer but park it in the range object.
    """
    range: DimensionRange = field(init=False)

    def __init__(self, sheetId: int, dimension: str,
                 startIndex: int|None = None,
                 endIndex: int|None = None) -> None:
        self.range = DimensionRange(sheetId, dimension, startIndex, endIndex)

    def to_base(self) -> dict:
        return {'range': self.range.to_base()}

@dataclass
class UpdateCellsRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#updatecellsrequest
    rows are RowData dicts, {'values': [CellData, ...]}.  Writing always
    anchors at a start coordinate rather than a range so the block can be
    any shape.
    """
    rows: list[dict]
    fields: str
    start: GridCoordinate = field(init=False)

    def __init__(self, sheetId: int, rowIndex: int, columnIndex: int,
                 rows: list[dict], fields: str) -> None:
        self.start = GridCoordinate(sheetId, rowIndex, columnIndex)
        self.rows = rows
        self.fields = fields

    def to_base(self) -> dict:
        return {'start': self.start.to_base(), 'rows': self.rows, 'fields': self.fields}

def make_request(requests: list[GoogleSheetsUpdateRequestBase|dict],
                 includeSpreadsheetInResponse: bool = False) -> dict:
    """
    Assemble a batchUpdate body.  The API applies the whole list or none of it.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate#request-body
    """
    return {
        'requests': [r.to_request() if isinstance(r, GoogleSheetsUpdateRequestBase) else r for r in requests],
        'includeSpreadsheetInResponse': includeSpreadsheetInResponse
    }
