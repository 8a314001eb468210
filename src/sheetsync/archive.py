from dataclasses import dataclass, field
from typing import Callable
import datetime
import logging

from .resources import SheetSyncResourceBase
from .store import TableStore
from .cells import CellValue, CellStyle, Row, is_blank_row, row_width
from .errors import ArchiveFailure, SheetSyncError

logger = logging.getLogger(__name__)

HEADER_MARKER = "data begins below"
NO_DATA_MARKER = "(no data)"
HEADER_STYLE = CellStyle(background="#d9ead3", bold=True)

@dataclass
class ArchiveRecord(SheetSyncResourceBase):
    """Where a snapshot landed in the archive table"""
    table_name: str = field(default="")
    timestamp: datetime.datetime|None = field(default=None)
    start_row: int = field(default=0)
    row_count: int = field(default=0)

    def __bool__(self) -> bool:
        return bool(self.table_name) and self.start_row > 0

class ArchiveWriter():
    """
    Copies a table into the archive table as one block:

        <timestamp> | <table name> | data begins below
        <row 1 of table, values and styles as they were>
        ...
        <blank row>

    An empty table gets a single '(no data)' row instead of data.  The block
    goes to the store as one append_rows call so it is either all there or
    not there at all, which is what lets the reconciler delete safely.
    """
    def __init__(self, store: TableStore, archive_table_name: str,
                 clock: Callable[[], datetime.datetime]|None = None,
                 create_missing: bool = True) -> None:
        self._store = store
        self._archive = archive_table_name
        self._clock = clock or datetime.datetime.now
        self._create_missing = create_missing

    @property
    def archive_table_name(self) -> str:
        return self._archive

    def build_block(self, table_name: str, rows: list[Row],
                    styles: list[list[CellStyle]],
                    timestamp: datetime.datetime) -> tuple[list[Row], list[list[CellStyle]], int]:
        """
        Assemble the rows and styles for one archive record.
        Returns (rows, styles, number of data rows).
        """
        header = [CellValue.date(timestamp), CellValue.text(table_name), CellValue.text(HEADER_MARKER)]
        block = [header]
        block_styles = [[HEADER_STYLE] * len(header)]
        data_rows = 0
        if rows and row_width(rows) > 0:
            for i, r in enumerate(rows):
                block.append(list(r))
                s = styles[i] if i < len(styles) else []
                block_styles.append(list(s[:len(r)]) + [CellStyle()] * (len(r) - len(s)))
            data_rows = len(rows)
        else:
            block.append([CellValue.text(NO_DATA_MARKER)])
            block_styles.append([CellStyle()])
        block.append([])
        block_styles.append([])
        return (block, block_styles, data_rows)

    def archive(self, table_name: str) -> ArchiveRecord:
        """
        Append a snapshot of table_name to the archive table.
        Raises ArchiveFailure if anything goes wrong, in which case nothing
        was written.
        """
        if table_name == self._archive:
            raise ArchiveFailure(table_name, ValueError("cannot archive the archive table into itself"))
        try:
            rows = self._store.get_rows(table_name)
            styles = self._store.get_cell_styles(table_name)
            if not self._store.has_table(self._archive):
                if not self._create_missing:
                    raise ArchiveFailure(table_name, ValueError(f"archive table '{self._archive}' does not exist"))
                logger.info("creating archive table %s", self._archive)
                self._store.create_table(self._archive)
            existing = self._store.get_rows(self._archive)
            timestamp = self._clock()
            block, block_styles, data_rows = self.build_block(table_name, rows, styles, timestamp)
            # some backends drop trailing blank rows, put the separator back
            leading = 1 if existing and not is_blank_row(existing[-1]) else 0
            if leading:
                block.insert(0, [])
                block_styles.insert(0, [])
            start = self._store.append_rows(self._archive, block, block_styles)
        except ArchiveFailure:
            raise
        except (SheetSyncError, ValueError, IndexError) as e:
            raise ArchiveFailure(table_name, e) from e
        header_row = start + leading
        record = ArchiveRecord(table_name, timestamp, header_row, data_rows)
        logger.info("archived %s (%d rows) to %s at row %d", table_name, data_rows, self._archive, header_row)
        return record
