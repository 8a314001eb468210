"""
Put a submitted form record into a table.  The record goes into the first
row that is completely empty, so gaps left by moved or cleared rows get
reused, or after the last row when there are no gaps.
"""
from typing import Callable, Iterable
import datetime
import logging

from .store import TableStore
from .cells import CellValue, Row, is_blank_row

logger = logging.getLogger(__name__)

def find_next_empty_row(rows: list[Row]) -> int:
    """1-based index of the first blank row, or one past the end"""
    for i, r in enumerate(rows):
        if is_blank_row(r):
            return i + 1
    return len(rows) + 1

def insert_record(store: TableStore, table_name: str, values: Iterable,
                  clock: Callable[[], datetime.datetime]|None = None,
                  timestamp: bool = True) -> int:
    """
    Write values as one row of table_name and return the row it landed in.
    With timestamp set the first cell is the submission time.
    """
    row: Row = [CellValue.of(v) for v in values]
    if timestamp:
        row.insert(0, CellValue.date((clock or datetime.datetime.now)()))
    if is_blank_row(row):
        raise ValueError("refusing to insert a record with no values")
    index = find_next_empty_row(store.get_rows(table_name))
    store.write_row(table_name, index, row)
    logger.info("inserted record into %s row %d", table_name, index)
    return index
