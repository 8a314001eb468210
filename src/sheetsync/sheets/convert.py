"""
Translation between CellValue/CellStyle and the API's CellData dicts.
https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/cells#celldata

Values are read from effectiveValue, and a number whose effective number
format is a date/time type comes back as a DATE.  Styles are read from
userEnteredFormat so only what somebody actually set is carried around.
"""
import datetime

from ..cells import CellValue, CellKind, CellStyle, Row, DEFAULT_STYLE, is_blank_row
from .resources import Color, GoogleSheetsEnum

# sheets counts days from here, 1900 leap year bug and all
SERIAL_EPOCH = datetime.datetime(1899, 12, 30)
DATE_TIME_PATTERN = "yyyy-mm-dd hh:mm:ss"
DATE_PATTERN = "yyyy-mm-dd"

# what updateCells is allowed to touch when writing a row
WRITE_FIELDS = ("userEnteredValue,userEnteredFormat.backgroundColor,"
                "userEnteredFormat.textFormat.bold,userEnteredFormat.numberFormat")
# what spreadsheets.get needs to return to read a table back
READ_FIELDS = ("sheets(properties(sheetId,title,index,gridProperties),"
               "data(startRow,rowData(values(effectiveValue,effectiveFormat/numberFormat,"
               "userEnteredFormat(backgroundColor,textFormat/bold)))))")

def to_serial(value: datetime.datetime|datetime.date) -> float:
    if not isinstance(value, datetime.datetime):
        value = datetime.datetime(value.year, value.month, value.day)
    if value.tzinfo is not None:
        value = value.replace(tzinfo=None)
    return (value - SERIAL_EPOCH).total_seconds() / 86400

def from_serial(serial: float, date_only: bool = False) -> datetime.datetime|datetime.date:
    # round to the millisecond, float days drift otherwise
    dt = SERIAL_EPOCH + datetime.timedelta(milliseconds=round(float(serial) * 86400000))
    return dt.date() if date_only else dt

def value_from_cell(cell: dict) -> CellValue:
    ev = cell.get("effectiveValue", None) or {}
    if "stringValue" in ev:
        return CellValue.text(ev["stringValue"])
    if "boolValue" in ev:
        return CellValue.of(bool(ev["boolValue"]))
    if "numberValue" in ev:
        nf = ((cell.get("effectiveFormat", None) or {}).get("numberFormat", None) or {})
        t = nf.get("type", "")
        if GoogleSheetsEnum.is_date_format(t):
            return CellValue.date(from_serial(ev["numberValue"], date_only=(t == "DATE")))
        n = ev["numberValue"]
        return CellValue.number(int(n) if isinstance(n, float) and n.is_integer() else n)
    if "errorValue" in ev:
        # keep what the user would see, e.g. #REF!
        return CellValue.text(str(ev["errorValue"].get("message", "") or ev["errorValue"].get("type", "#ERROR")))
    return CellValue()

def style_from_cell(cell: dict) -> CellStyle:
    uf = cell.get("userEnteredFormat", None) or {}
    bg = uf.get("backgroundColor", None)
    bold = bool((uf.get("textFormat", None) or {}).get("bold", False))
    background = Color(**{k: v for k, v in bg.items() if k in ("red", "green", "blue")}).to_hex() if bg else None
    return CellStyle(background, bold)

def cell_to_data(value: CellValue, style: CellStyle|None = None) -> dict:
    """One CellData for updateCells, using WRITE_FIELDS as the mask"""
    style = style or DEFAULT_STYLE
    data = {}
    fmt = {}
    if value.kind == CellKind.TEXT:
        data['userEnteredValue'] = {'stringValue': value.value}
    elif value.kind == CellKind.NUMBER:
        data['userEnteredValue'] = {'numberValue': value.value}
    elif value.kind == CellKind.DATE:
        data['userEnteredValue'] = {'numberValue': to_serial(value.value)}
        if isinstance(value.value, datetime.datetime):
            fmt['numberFormat'] = {'type': 'DATE_TIME', 'pattern': DATE_TIME_PATTERN}
        else:
            fmt['numberFormat'] = {'type': 'DATE', 'pattern': DATE_PATTERN}
    if style.background is not None:
        fmt['backgroundColor'] = Color.from_hex(style.background).to_base()
    if style.bold:
        fmt['textFormat'] = {'bold': True}
    if fmt:
        data['userEnteredFormat'] = fmt
    return data

def row_to_data(row: Row, styles: list[CellStyle]|None = None) -> dict:
    styles = styles or []
    return {'values': [cell_to_data(v, styles[i] if i < len(styles) else None) for i, v in enumerate(row)]}

def grid_to_rows(sheet: dict) -> tuple[list[Row], list[list[CellStyle]]]:
    """
    Rows and styles out of one sheet of a spreadsheets.get response with grid
    data.  Trailing blank rows and trailing unstyled empty cells are dropped.
    """
    rows: list[Row] = []
    styles: list[list[CellStyle]] = []
    for gd in sheet.get("data", []) or []:
        start = int(gd.get("startRow", 0) or 0)
        while len(rows) < start:
            rows.append([])
            styles.append([])
        for rd in gd.get("rowData", []) or []:
            cells = (rd or {}).get("values", []) or []
            r = [value_from_cell(c or {}) for c in cells]
            s = [style_from_cell(c or {}) for c in cells]
            while r and r[-1].is_empty and s[-1].is_default:
                r.pop()
                s.pop()
            rows.append(r)
            styles.append(s)
    while rows and is_blank_row(rows[-1]):
        rows.pop()
        styles.pop()
    return (rows, styles)
