from dataclasses import dataclass, field
import logging

from .resources import SheetSyncResourceBase
from .store import TableStore
from .config import SyncConfig
from .archive import ArchiveWriter
from .notify import Notifier, log_notifier
from .errors import (ConfigurationError, AlreadyExists, DuplicateName,
                     ArchiveFailure, SheetSyncError)

logger = logging.getLogger(__name__)

@dataclass
class ReconcileResult(SheetSyncResourceBase):
    """
    What a reconcile pass did.
    skipped holds names that were not acted on (duplicates in the control
    list, creates that hit an existing table).  errors holds the message for
    every failure that was reported.
    """
    created: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    archived: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def changed(self) -> bool:
        return bool(self.created or self.deleted)

    def __str__(self) -> str:
        return f"created={self.created} deleted={self.deleted} skipped={self.skipped} errors={len(self.errors)}"

class Reconciler():
    """
    Make the live set of tables match the names listed in the control table.

    Missing tables are created at the end of the ordering.  Tables that are no
    longer listed, and are not protected, are archived and then deleted.  A
    table whose archive fails is kept.  Running it twice in a row does nothing
    the second time.
    """
    def __init__(self, store: TableStore, config: SyncConfig,
                 archive_writer: ArchiveWriter|None = None,
                 notifier: Notifier|None = None) -> None:
        self._store = store
        self._config = config
        self._archive = archive_writer or ArchiveWriter(store, config.archive_table_name,
                                                        create_missing=config.create_archive_table)
        self._notify = notifier or log_notifier

    @property
    def config(self) -> SyncConfig:
        return self._config

    def read_control_list(self) -> list[str]:
        """
        Names from the control range of the control table, in sheet order,
        blanks dropped and whitespace trimmed.  Raises ConfigurationError if
        there is no control table.
        """
        c = self._config
        if not self._store.has_table(c.control_table_name):
            raise ConfigurationError(f"control table '{c.control_table_name}' is missing")
        rows = self._store.get_rows(c.control_table_name)
        names = []
        for index in range(c.control_range_start, min(c.control_range_end, len(rows)) + 1):
            row = rows[index - 1]
            if len(row) >= c.control_column:
                name = row[c.control_column - 1].as_text().strip()
                if name:
                    names.append(name)
        return names

    def _report(self, result: ReconcileResult, message: str) -> None:
        result.errors.append(message)
        self._notify(message)

    def reconcile(self, control_list: list[str]|None = None) -> ReconcileResult:
        """
        One reconciliation pass.  control_list is normally read from the
        control table, passing one in is for callers that already have it.
        """
        result = ReconcileResult()
        c = self._config
        if not self._store.has_table(c.control_table_name):
            self._report(result, f"Configuration error: control table '{c.control_table_name}' is missing, nothing done")
            return result
        try:
            declared = self.read_control_list() if control_list is None else [str(n).strip() for n in control_list if str(n).strip()]
            # one snapshot up front, everything below is decided from it
            existing = list(self._store.list_tables())
        except SheetSyncError as e:
            self._report(result, f"Configuration error: cannot read control list: {e}")
            return result

        protected = c.protected
        existing_set = set(existing)
        wanted = set()
        to_create = []
        for name in declared:
            if name in wanted:
                logger.debug("duplicate name %s in control list ignored", name)
                result.skipped.append(name)
                continue
            wanted.add(name)
            if name not in existing_set and name not in protected:
                to_create.append(name)
        to_remove = [n for n in existing if n not in wanted and n not in protected]

        for name in to_create:
            try:
                self._store.create_table(name)
            except AlreadyExists as e:
                # created behind our back since the snapshot, not fatal
                dup = e if isinstance(e, DuplicateName) else DuplicateName(name)
                logger.info("skipping create: %s", dup)
                result.skipped.append(name)
                continue
            except SheetSyncError as e:
                self._report(result, f"Failed to create table '{name}': {e}")
                continue
            logger.info("created table %s", name)
            result.created.append(name)

        for name in to_remove:
            try:
                self._archive.archive(name)
            except ArchiveFailure as e:
                self._report(result, f"Archive failed, '{name}' was not deleted: {e}")
                continue
            result.archived.append(name)
            try:
                self._store.delete_table(name)
            except SheetSyncError as e:
                self._report(result, f"Failed to delete table '{name}' after archiving: {e}")
                continue
            logger.info("deleted table %s", name)
            result.deleted.append(name)

        if result.changed:
            logger.info("reconcile: %s", result)
        else:
            logger.debug("reconcile: nothing to do")
        return result
