import logging

from .store import TableStore
from .cells import CellValue, CellStyle, Row, DEFAULT_STYLE
from .events import CellChangedEvent
from .errors import NotFound, AlreadyExists, StoreError

logger = logging.getLogger(__name__)

class _Table():
    def __init__(self, name: str) -> None:
        self.name = name
        self.rows: list[Row] = []
        self.styles: list[list[CellStyle]] = []

    def ensure(self, row: int, column: int = 0) -> None:
        """Grow so that 1-based (row, column) exists"""
        while len(self.rows) < row:
            self.rows.append([])
            self.styles.append([])
        r, s = self.rows[row - 1], self.styles[row - 1]
        while len(r) < column:
            r.append(CellValue())
        while len(s) < column:
            s.append(DEFAULT_STYLE)

class MemoryTableStore(TableStore):
    """
    Table store held entirely in process.  Every call either completes or
    raises before touching anything, so it doubles as the reference for how
    a backend should behave.

    set_cell() is how a 'user' edits a cell: it writes the value and then
    emits a CellChangedEvent to subscribers, like a spreadsheet edit trigger.

    fail_on is a set of operation names ('append_rows', 'delete_row', ...)
    that raise StoreError instead of running, for exercising failure paths.
    """
    def __init__(self, tables: dict[str, list]|None = None) -> None:
        super().__init__()
        self._tables: dict[str, _Table] = {}
        self.fail_on: set[str] = set()
        for name, rows in (tables or {}).items():
            self.create_table(name)
            if rows:
                self.append_rows(name, [[CellValue.of(v) for v in r] for r in rows])

    def __contains__(self, name: str) -> bool:
        return name in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def __repr__(self) -> str:
        return f"{self.__class__}:{list(self._tables)}"

    def _check(self, op: str) -> None:
        if op in self.fail_on:
            raise StoreError(f"{op} failed (injected)")

    def _table(self, name: str) -> _Table:
        t = self._tables.get(name, None)
        if t is None:
            raise NotFound(name)
        return t

    def list_tables(self) -> list[str]:
        return list(self._tables)

    def has_table(self, name: str) -> bool:
        return name in self._tables

    def create_table(self, name: str) -> None:
        self._check("create_table")
        if not name:
            raise ValueError("table name must not be empty")
        if name in self._tables:
            raise AlreadyExists(name)
        self._tables[name] = _Table(name)
        logger.debug("created table %s", name)

    def delete_table(self, name: str) -> None:
        self._check("delete_table")
        self._table(name)
        del self._tables[name]
        logger.debug("deleted table %s", name)

    def get_rows(self, name: str) -> list[Row]:
        return [list(r) for r in self._table(name).rows]

    def get_cell_styles(self, name: str) -> list[list[CellStyle]]:
        return [list(s) for s in self._table(name).styles]

    def append_rows(self, name: str, rows: list[Row],
                    styles: list[list[CellStyle]]|None = None) -> int:
        self._check("append_rows")
        t = self._table(name)
        if styles is not None and len(styles) != len(rows):
            raise ValueError("styles must have one entry per row")
        # build the whole block first so a bad cell leaves the table untouched
        new_rows = [[CellValue.of(c) for c in r] for r in rows]
        new_styles = []
        for i, r in enumerate(new_rows):
            s = list(styles[i]) if styles is not None and styles[i] is not None else []
            s = s[:len(r)] + [DEFAULT_STYLE] * (len(r) - len(s))
            new_styles.append(s)
        start = len(t.rows) + 1
        t.rows.extend(new_rows)
        t.styles.extend(new_styles)
        return start

    def delete_row(self, name: str, index: int) -> None:
        self._check("delete_row")
        t = self._table(name)
        if index < 1 or index > len(t.rows):
            raise IndexError(f"row {index} out of range for '{name}' ({len(t.rows)} rows)")
        del t.rows[index - 1]
        del t.styles[index - 1]

    def write_row(self, name: str, index: int, row: Row) -> None:
        self._check("write_row")
        t = self._table(name)
        if index < 1:
            raise IndexError(f"row {index} out of range for '{name}'")
        new_row = [CellValue.of(c) for c in row]
        t.ensure(index)
        old_styles = t.styles[index - 1]
        t.rows[index - 1] = new_row
        t.styles[index - 1] = old_styles[:len(new_row)] + [DEFAULT_STYLE] * (len(new_row) - len(old_styles))

    def set_cell(self, name: str, row: int, column: int, value) -> CellChangedEvent:
        """
        Edit a single cell and notify subscribers, returns the event emitted.
        """
        self._check("set_cell")
        t = self._table(name)
        if row < 1 or column < 1:
            raise IndexError(f"Invalid cell R{row}C{column}")
        new = CellValue.of(value)
        t.ensure(row, column)
        old = t.rows[row - 1][column - 1]
        t.rows[row - 1][column - 1] = new
        event = CellChangedEvent(name, row, column, new, old)
        self.emit(event)
        return event

    def set_style(self, name: str, row: int, column: int, style: CellStyle) -> None:
        t = self._table(name)
        t.ensure(row, column)
        t.styles[row - 1][column - 1] = style

    def snapshot(self) -> dict[str, list[list]]:
        """Plain python values of every table, for comparisons in tests and logs"""
        return {n: [[c.to_python() for c in r] for r in t.rows] for n, t in self._tables.items()}
