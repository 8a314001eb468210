"""
The table store contract.

A 'table' is a named, ordered collection of rows, a sheet/tab in spreadsheet
terms.  Everything the reconciler, migrator and archive writer do goes through
this interface so they can run against a real spreadsheet or an in-memory one.

Rows are 1-based to match A1 notation.  Operations on a missing table raise
NotFound, creating a duplicate raises AlreadyExists.  A backend must make each
call all-or-nothing: a reader never sees half of an append_rows block.
"""
from abc import ABC, abstractmethod
import logging

from .cells import CellStyle, Row
from .events import CellChangedEvent, Handler

logger = logging.getLogger(__name__)

class TableStore(ABC):

    def __init__(self) -> None:
        self._handlers: list[Handler] = []

    # events

    def on_cell_changed(self, handler: Handler) -> Handler:
        """
        Subscribe to cell edits.  Returns the handler so this can be used as
        a decorator.
        """
        if handler not in self._handlers:
            self._handlers.append(handler)
        return handler

    def remove_handler(self, handler: Handler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def emit(self, event: CellChangedEvent) -> None:
        """
        Deliver an edit to every subscriber.  A failing handler is logged and
        does not stop the rest from seeing the event.
        """
        for h in list(self._handlers):
            try:
                h(event)
            except Exception:
                logger.exception("cell change handler failed for %s!R%dC%d",
                                 event.table, event.row, event.column)

    # tables

    @abstractmethod
    def list_tables(self) -> list[str]:
        """Table names in display order"""

    @abstractmethod
    def create_table(self, name: str) -> None:
        """New empty table added at the end of the ordering"""

    @abstractmethod
    def delete_table(self, name: str) -> None:
        pass

    def has_table(self, name: str) -> bool:
        return name in self.list_tables()

    # rows

    @abstractmethod
    def get_rows(self, name: str) -> list[Row]:
        """
        All rows, cells as CellValue.  Rows may be ragged, trailing empty cells
        are not padded out.  A backend that cannot tell a blank row from no row
        (a spreadsheet) stops at the last row with content.
        """

    @abstractmethod
    def get_cell_styles(self, name: str) -> list[list[CellStyle]]:
        """Per-cell styles with the same shape as get_rows()"""

    @abstractmethod
    def append_rows(self, name: str, rows: list[Row],
                    styles: list[list[CellStyle]]|None = None) -> int:
        """
        Append a block of rows after the last row, atomically.
        Returns the 1-based index of the first appended row.
        """

    @abstractmethod
    def delete_row(self, name: str, index: int) -> None:
        """Remove a row, following rows shift up.  IndexError if out of range."""

    @abstractmethod
    def write_row(self, name: str, index: int, row: Row) -> None:
        """Overwrite the row at index, growing the table if required"""

    def append_row(self, name: str, row: Row, styles: list[CellStyle]|None = None) -> int:
        return self.append_rows(name, [row], [styles] if styles is not None else None)

    def row_count(self, name: str) -> int:
        return len(self.get_rows(name))

    def get_row(self, name: str, index: int) -> Row:
        rows = self.get_rows(name)
        if index < 1 or index > len(rows):
            raise IndexError(f"row {index} out of range for '{name}' ({len(rows)} rows)")
        return list(rows[index - 1])
