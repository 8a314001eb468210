from typing import Callable
import datetime
import logging
import threading

from .store import TableStore
from .config import SyncConfig
from .events import CellChangedEvent, Debouncer
from .archive import ArchiveWriter
from .reconcile import Reconciler, ReconcileResult
from .migrate import RowMigrator, MigrationResult
from .notify import Notifier, log_notifier

logger = logging.getLogger(__name__)

class SheetSyncEngine():
    """
    Wires the pieces together and routes cell edits:

    - an edit in the control range of the control table schedules a
      reconcile, debounced so that pasting a block of names is one pass
    - an edit of the status column of any other unprotected table moves
      that row
    - anything else is ignored

    A debounced reconcile runs on a timer thread.  Reconciles and row moves
    share one lock so each runs to completion before the other starts, a row
    is never moved into a table that a reconcile is part way through deleting.

    Call start() to subscribe to the store's edits.  timer_factory is passed
    to the Debouncer, see there.
    """
    def __init__(self, store: TableStore, config: SyncConfig|None = None,
                 notifier: Notifier|None = None,
                 clock: Callable[[], datetime.datetime]|None = None,
                 timer_factory: Callable|None = None) -> None:
        self._store = store
        self._config = config or SyncConfig()
        self._notify = notifier or log_notifier
        self.archive_writer = ArchiveWriter(store, self._config.archive_table_name, clock,
                                            create_missing=self._config.create_archive_table)
        self.reconciler = Reconciler(store, self._config, self.archive_writer, self._notify)
        self.migrator = RowMigrator(store, self._config, self._notify)
        kwargs = {"timer_factory": timer_factory} if timer_factory is not None else {}
        self._debouncer = Debouncer(self._config.debounce_seconds, self._run_reconcile, **kwargs)
        self._started = False
        self._lock = threading.RLock()
        self.last_result: ReconcileResult|None = None

    @property
    def config(self) -> SyncConfig:
        return self._config

    @property
    def store(self) -> TableStore:
        return self._store

    @property
    def started(self) -> bool:
        return self._started

    @property
    def reconcile_pending(self) -> bool:
        return self._debouncer.pending

    def start(self) -> None:
        if not self._started:
            self._store.on_cell_changed(self.handle_edit)
            self._started = True

    def stop(self) -> None:
        """Unsubscribe and drop any reconcile still waiting on the debounce"""
        if self._started:
            self._store.remove_handler(self.handle_edit)
            self._started = False
        self._debouncer.cancel()

    def handle_edit(self, event: CellChangedEvent) -> MigrationResult|None:
        c = self._config
        if event.table == c.control_table_name:
            if c.in_control_range(event.row, event.column):
                logger.debug("control range edit at R%dC%d, reconcile scheduled", event.row, event.column)
                self._debouncer.trigger()
            return None
        if event.table in c.protected:
            return None
        if event.column == c.status_column_index and event.row > c.header_rows:
            if event.value.is_empty:
                return None
            with self._lock:
                return self.migrator.migrate_row(event.table, event.row, event.column)
        return None

    def _run_reconcile(self) -> ReconcileResult:
        with self._lock:
            result = self.reconciler.reconcile()
            self.last_result = result
        return result

    def sync_now(self) -> ReconcileResult:
        """Reconcile immediately, a pending debounced pass is dropped as this covers it"""
        with self._lock:
            self._debouncer.cancel()
            return self._run_reconcile()

    def flush(self) -> bool:
        """Run a pending debounced reconcile now"""
        with self._lock:
            return self._debouncer.flush()
