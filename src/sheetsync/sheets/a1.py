import re

from . import GoogleSheetsMaxColumns

class GoogleSheetsA1Notation():
    """
    Helpers for Google Sheets A1 range notation.
    See https://developers.google.com/sheets/api/guides/concepts#cell
    A general A1 has the form:

    <title>!<start col><start row>:<end col><end row>

    Rows are 1-based integers, columns are A-ZZZ.  A title that is not a
    plain word has to be wrapped in single quotes, with any single quote in
    the title doubled up.  The table store only ever needs to address a
    whole sheet or a rectangle anchored in it, so that is all this covers.
    """
    _A1COLREGEXSTR = r"^[A-Z]{1,3}$"
    _PLAIN_TITLE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
    _a1_col_re = re.compile(_A1COLREGEXSTR)

    @classmethod
    def col_to_int(cls, column: str) -> int:
        """
        Convert a sheet column A-ZZZ to its integer equivalent.
        Note that this is 1-based, so 'A' goes to 1.
        A return value of 0 means invalid column.
        """
        c = str(column).upper()
        num = 0
        if cls._a1_col_re.match(c):
            for i, v in enumerate(reversed(c)):
                num += (ord(v) - 64) * (26 ** i)
        return num

    @classmethod
    def int_to_col(cls, index: int) -> str:
        """
        Translate a 1-based column index to A-ZZZ.
        An empty string signals an invalid index.
        """
        i = int(index)
        if i < 1 or i > GoogleSheetsMaxColumns:
            return ""
        col = ""
        while i:
            # bijective base 26, there is no zero digit
            i, r = divmod(i - 1, 26)
            col = chr(r + 65) + col
        return col

    @classmethod
    def quote_title(cls, title: str) -> str:
        t = str(title)
        if cls._PLAIN_TITLE_RE.match(t) and not cls._looks_like_cell(t):
            return t
        return "'" + t.replace("'", "''") + "'"

    @classmethod
    def _looks_like_cell(cls, title: str) -> bool:
        """A title like 'AB12' would read as a cell reference so must be quoted"""
        return bool(re.match(r"^[A-Za-z]{1,3}\d+$", title))

    @classmethod
    def generate_a1(cls, sheet: str = "",
                    start_col: str|int = "", start_row: int = 0,
                    end_col: str|int = "", end_row: int = 0) -> str:
        """
        Generate an A1 range.  Any empty/0 part is left out which the API
        reads as unbounded, so generate_a1('Orders') is the whole sheet.
        """
        a1 = cls.quote_title(sheet) if sheet else ""
        sc = cls.int_to_col(start_col) if isinstance(start_col, int) and start_col else str(start_col or "")
        ec = cls.int_to_col(end_col) if isinstance(end_col, int) and end_col else str(end_col or "")
        if sc or start_row:
            start = f"{sc}{start_row if start_row else ''}"
            end = f"{ec}{end_row if end_row else ''}"
            cells = start + (":" + end if end else "")
            a1 = f"{a1}!{cells}" if a1 else cells
        return a1
