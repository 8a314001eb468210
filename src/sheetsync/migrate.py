from dataclasses import dataclass, field
import logging

from .resources import SheetSyncResourceBase
from .store import TableStore
from .config import SyncConfig
from .notify import Notifier, log_notifier
from .errors import TargetNotFound, SheetSyncError

logger = logging.getLogger(__name__)

@dataclass
class MigrationResult(SheetSyncResourceBase):
    source: str = field(default="")
    row_index: int = field(default=0)
    target: str = field(default="")
    moved: bool = field(default=False)
    new_row_index: int = field(default=0)
    error: str = field(default="")

    def __bool__(self) -> bool:
        return self.moved

class RowMigrator():
    """
    Move a row into the table named by its status cell.

    The row is appended to the target first and only removed from the source
    once that worked.  If removing it fails the appended copy is taken back
    out so the row ends up in exactly one place.
    """
    def __init__(self, store: TableStore, config: SyncConfig,
                 notifier: Notifier|None = None) -> None:
        self._store = store
        self._config = config
        self._notify = notifier or log_notifier

    def migrate_row(self, source_table: str, row_index: int,
                    status_column: int|None = None) -> MigrationResult:
        col = status_column or self._config.status_column_index
        result = MigrationResult(source_table, row_index)
        if row_index <= self._config.header_rows:
            logger.debug("row %d of %s is a header row, not migrating", row_index, source_table)
            return result
        try:
            row = self._store.get_row(source_table, row_index)
        except (SheetSyncError, IndexError) as e:
            result.error = f"Cannot read row {row_index} of '{source_table}': {e}"
            self._notify(result.error)
            return result

        status = row[col - 1].as_text().strip() if len(row) >= col else ""
        if not status:
            logger.debug("empty status in %s row %d, nothing to do", source_table, row_index)
            return result
        result.target = status

        if status in self._config.protected:
            # a row landing in the control table would be read as table names
            result.error = f"'{status}' is a protected table, row {row_index} of '{source_table}' left in place"
            self._notify(result.error)
            return result

        if not self._store.has_table(status):
            e = TargetNotFound(status, source_table, row_index)
            result.error = str(e)
            self._notify(result.error)
            return result

        if status == source_table and not self._config.relocate_on_same_table:
            logger.debug("status of %s row %d names its own table, leaving it", source_table, row_index)
            return result

        styles = self._store.get_cell_styles(source_table)
        row_styles = styles[row_index - 1] if row_index <= len(styles) else None
        try:
            new_index = self._store.append_row(status, row, row_styles)
        except SheetSyncError as e:
            result.error = f"Failed to move row {row_index} of '{source_table}' to '{status}': {e}"
            self._notify(result.error)
            return result

        try:
            self._store.delete_row(source_table, row_index)
        except (SheetSyncError, IndexError) as e:
            result.error = f"Failed to remove row {row_index} from '{source_table}', move undone: {e}"
            self._undo_append(status, new_index)
            self._notify(result.error)
            return result

        result.moved = True
        # a move within the same table shifts the copy up by one
        result.new_row_index = new_index - 1 if status == source_table else new_index
        logger.info("moved %s row %d to %s row %d", source_table, row_index, status, result.new_row_index)
        return result

    def _undo_append(self, table: str, index: int) -> None:
        try:
            self._store.delete_row(table, index)
        except (SheetSyncError, IndexError):
            logger.exception("could not undo append of row %d to %s, row is now in both tables", index, table)
