"""
Class implementations of the few Sheets API resources the table store needs.
As these are just logical groupings of data fields we use dataclasses.
asdict() gives exactly the dict the client wants, the way back from a
response dict needs the nested dataclasses fixed up by hand.
https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets
"""
from dataclasses import dataclass, field, asdict

from ..resources import SheetSyncResourceBase

class GoogleSheetsEnum():
    """
    An 'enum' in the sheets client is just a string so this is
    just to translate and validate input.
    """
    _VALID_DIMENSION_OPTIONS = {
        "ROWS": "ROWS",
        "R": "ROWS",
        "C": "COLUMNS",
        "COLS": "COLUMNS",
        "COLUMNS": "COLUMNS"
    }
    _DATE_NUMBER_FORMATS = ("DATE", "TIME", "DATE_TIME")

    @classmethod
    def dimension(cls, dim: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/Dimension"""
        return cls._VALID_DIMENSION_OPTIONS.get(str(dim).upper(), "")

    @classmethod
    def is_date_format(cls, number_format_type: str) -> bool:
        """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/cells#numberformattype"""
        return str(number_format_type).upper() in cls._DATE_NUMBER_FORMATS

@dataclass
class Color(SheetSyncResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/other#color
    Channels are floats in [0, 1], the API leaves out channels that are 0.
    """
    red: int|float = field(default=0)
    green: int|float = field(default=0)
    blue: int|float = field(default=0)

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        h = str(value).lstrip('#')
        if len(h) != 6:
            raise ValueError(f"Invalid hex colour: {value}")
        r, g, b = (int(h[i:i + 2], 16) / 255 for i in (0, 2, 4))
        return cls(r, g, b)

    def to_hex(self) -> str:
        return "#" + "".join(f"{max(0, min(255, round(float(c) * 255))):02x}"
                             for c in (self.red, self.green, self.blue))

    def to_base(self) -> dict:
        return {k: float(v) for k, v in asdict(self).items()}

@dataclass
class GridProperties(SheetSyncResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#gridproperties"""
    rowCount: int = field(default=-1)
    columnCount: int = field(default=-1)
    frozenRowCount: int = field(default=0)
    frozenColumnCount: int = field(default=0)

    def __bool__(self) -> bool:
        return self.rowCount >= 0 and self.columnCount >= 0

@dataclass
class SheetProperties(SheetSyncResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#sheetproperties"""
    sheetId: int = field(default=-1)
    title: str = field(default="")
    index: int = field(default=-1)
    sheetType: str = field(default="GRID")
    gridProperties: GridProperties|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.gridProperties = self.gridProperties if isinstance(self.gridProperties,GridProperties) else GridProperties(**_known(GridProperties, self.gridProperties))

    def __bool__(self) -> bool:
        return self.sheetId >= 0 and bool(self.title)

    def __str__(self) -> str:
        if self:
            return f"{self.title}({self.sheetId}[{self.index}])"
        return "<invalid sheet>"

    @property
    def rows(self) -> int:
        return self.gridProperties.rowCount

    @property
    def cols(self) -> int:
        return self.gridProperties.columnCount

@dataclass
class GridCoordinate(SheetSyncResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/other#gridcoordinate
    0-based, unlike everything the table store exposes.
    """
    sheetId: int = field(default=-1)
    rowIndex: int = field(default=0)
    columnIndex: int = field(default=0)

@dataclass
class DimensionRange(SheetSyncResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/DimensionRange"""
    sheetId: int = field(default=-1)
    dimension: str = field(default="ROWS")
    startIndex: int|None = field(default=None)
    endIndex: int|None = field(default=None)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        d = str(self.dimension)
        self.dimension = GoogleSheetsEnum.dimension(d)
        if not self.dimension:
            raise ValueError(f"Invalid dimension value: {d}")

    def to_base(self) -> dict:
        # the API treats a missing index as unbounded, None would be rejected
        return {k: v for k, v in super().to_base().items() if v is not None}

def _known(cls, values) -> dict:
    """Only the keys a dataclass knows about, responses carry plenty more"""
    names = cls.__dataclass_fields__.keys()
    return {k: v for k, v in dict(values or {}).items() if k in names}

def sheet_properties(sheet: dict) -> SheetProperties:
    """Pull the properties out of a raw sheet dict from a spreadsheets.get response"""
    return SheetProperties(**_known(SheetProperties, sheet.get("properties", {})))
