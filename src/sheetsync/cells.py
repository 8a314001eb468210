"""
Cell values and styles.

A row is a plain list of CellValue.  CellValue is a small tagged variant so
that archive and migrate code never has to guess whether a '' means empty or
whether a float is really a date.
"""
from dataclasses import dataclass, field
from enum import Enum
import datetime
import re

class CellKind(Enum):
    EMPTY = "EMPTY"
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    DATE = "DATE"

@dataclass(frozen=True)
class CellValue():
    kind: CellKind = field(default=CellKind.EMPTY)
    value: str|int|float|datetime.datetime|datetime.date|None = field(default=None)

    def __post_init__(self) -> None:
        # the variant has to agree with its payload
        if self.kind == CellKind.EMPTY and self.value is not None:
            raise ValueError("empty cell cannot carry a value")
        if self.kind == CellKind.TEXT and not isinstance(self.value, str):
            raise ValueError(f"text cell needs a str, got {type(self.value)}")
        if self.kind == CellKind.NUMBER and (isinstance(self.value, bool) or not isinstance(self.value, (int, float))):
            raise ValueError(f"number cell needs an int or float, got {type(self.value)}")
        if self.kind == CellKind.DATE and not isinstance(self.value, (datetime.datetime, datetime.date)):
            raise ValueError(f"date cell needs a date or datetime, got {type(self.value)}")

    @classmethod
    def empty(cls) -> "CellValue":
        return cls()

    @classmethod
    def text(cls, value: str) -> "CellValue":
        return cls(CellKind.TEXT, str(value)) if value != "" else cls()

    @classmethod
    def number(cls, value: int|float) -> "CellValue":
        return cls(CellKind.NUMBER, value)

    @classmethod
    def date(cls, value: datetime.datetime|datetime.date) -> "CellValue":
        return cls(CellKind.DATE, value)

    @classmethod
    def of(cls, value) -> "CellValue":
        """
        Wrap a raw python value.  None and '' are empty, bools become the
        TRUE/FALSE text a sheet shows, a CellValue passes through.
        """
        if isinstance(value, CellValue):
            return value
        if value is None or value == "":
            return cls()
        if isinstance(value, bool):
            return cls(CellKind.TEXT, "TRUE" if value else "FALSE")
        if isinstance(value, (int, float)):
            return cls(CellKind.NUMBER, value)
        if isinstance(value, (datetime.datetime, datetime.date)):
            return cls(CellKind.DATE, value)
        return cls(CellKind.TEXT, str(value))

    @property
    def is_empty(self) -> bool:
        return self.kind == CellKind.EMPTY

    def __bool__(self) -> bool:
        return not self.is_empty

    def __str__(self) -> str:
        return self.as_text()

    def as_text(self) -> str:
        """Text as a sheet would display it, '' for empty"""
        if self.kind == CellKind.EMPTY:
            return ""
        if self.kind == CellKind.NUMBER:
            # 3.0 shows as 3 in a sheet
            if isinstance(self.value, float) and self.value.is_integer():
                return str(int(self.value))
            return str(self.value)
        if self.kind == CellKind.DATE:
            return self.value.isoformat(sep=" ") if isinstance(self.value, datetime.datetime) else self.value.isoformat()
        return self.value

    def to_python(self):
        return self.value

Row = list[CellValue]

def make_row(values) -> Row:
    """Convenience to build a row from raw python values"""
    return [CellValue.of(v) for v in values]

def is_blank_row(row: Row) -> bool:
    """Every cell empty, a row with no cells counts as blank"""
    return all(c.is_empty for c in row)

def row_width(rows: list[Row]) -> int:
    return max((len(r) for r in rows), default=0)

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")

@dataclass(frozen=True)
class CellStyle():
    """
    The part of a cell's format that is carried along when a table is archived,
    background colour as #rrggbb (None is the sheet default) and bold text.
    """
    background: str|None = field(default=None)
    bold: bool = field(default=False)

    def __post_init__(self) -> None:
        if self.background is not None:
            m = _HEX_RE.match(str(self.background))
            if not m:
                raise ValueError(f"Invalid background colour: {self.background}")
            # frozen, so go through object to normalise
            object.__setattr__(self, "background", "#" + m.group(1).lower())

    @property
    def is_default(self) -> bool:
        return self.background is None and not self.bold

DEFAULT_STYLE = CellStyle()
