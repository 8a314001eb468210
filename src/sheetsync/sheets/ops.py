"""
Thin wrappers around the spreadsheets resource of the Sheets v4 client.
They take the service explicitly (the store holds on to one) and turn
HttpErrors into the package's StoreError/NotFound.
"""
from googleapiclient.errors import HttpError

from .a1 import GoogleSheetsA1Notation
from .requests import GoogleSheetsUpdateRequestBase, make_request
from ..errors import StoreError, NotFound

def _status(e: HttpError) -> int:
    try:
        return int(e.resp.status)
    except (AttributeError, TypeError, ValueError):
        return 0

def _wrap(e: HttpError, what: str, name: str = "") -> StoreError:
    status = _status(e)
    text = str(e)
    if status == 404:
        return NotFound(name or what, f"{what}: not found ({status})")
    if status == 400 and name and "Unable to parse range" in text:
        # asking for a range on a sheet that does not exist
        return NotFound(name)
    return StoreError(f"{what} failed ({status}): {text}")

def get(service, spreadsheetId: str,
        ranges: list[str]|None = None,
        includeGridData: bool = False,
        fields: str|None = None,
        table: str = "") -> dict:
    """
    Wrapper for calling the get() spreadsheet method.
    See https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/get
    Returns the raw response dict.
    """
    args = {"spreadsheetId": spreadsheetId, "includeGridData": includeGridData}
    if ranges:
        args["ranges"] = [str(r) for r in ranges]
    if fields:
        args["fields"] = fields
    try:
        return service.spreadsheets().get(**args).execute() or {}
    except HttpError as e:
        raise _wrap(e, f"get spreadsheet {spreadsheetId}", table) from e

def get_sheets(service, spreadsheetId: str) -> list[dict]:
    """Just the sheet properties, in tab order"""
    response = get(service, spreadsheetId,
                   fields="sheets(properties(sheetId,title,index,gridProperties))")
    sheets = response.get("sheets", []) or []
    return sorted(sheets, key=lambda s: s.get("properties", {}).get("index", 0))

def get_grid(service, spreadsheetId: str, title: str, fields: str) -> dict:
    """One sheet with its grid data, or NotFound"""
    a1 = GoogleSheetsA1Notation.generate_a1(title)
    response = get(service, spreadsheetId, [a1], True, fields, table=title)
    sheets = response.get("sheets", []) or []
    if not sheets:
        raise NotFound(title)
    return sheets[0]

def batchUpdate(service, spreadsheetId: str,
                requests: list[GoogleSheetsUpdateRequestBase|dict],
                table: str = "") -> dict:
    """
    Wrapper for calling the batchUpdate() spreadsheet method.
    See https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate
    The requests are applied together or not at all.
    """
    body = make_request(requests)
    try:
        return service.spreadsheets().batchUpdate(spreadsheetId=spreadsheetId, body=body).execute() or {}
    except HttpError as e:
        raise _wrap(e, f"batchUpdate on {spreadsheetId}", table) from e
