"""
Keep the tabs of a spreadsheet in line with a declared list of names and move
rows between tabs when their status cell changes.

A 'control' table holds the list of names that should exist.  Reconciling
creates whatever is missing and archives then deletes whatever is no longer
listed.  Editing the status column of a row moves that row into the table
named by the new status.  Before a table is deleted its full contents are
copied into an 'archive' table with a timestamped header.

Everything goes through a TableStore so the same logic runs against an
in-memory store or a real Google Sheets spreadsheet.
"""
import logging

from .errors import *
from .cells import CellKind, CellValue, CellStyle, Row, is_blank_row
from .config import SyncConfig
from .store import TableStore
from .memory import MemoryTableStore
from .events import CellChangedEvent, Debouncer
from .archive import ArchiveWriter, ArchiveRecord
from .reconcile import Reconciler, ReconcileResult
from .migrate import RowMigrator, MigrationResult
from .forms import find_next_empty_row, insert_record
from .engine import SheetSyncEngine

logging.getLogger(__name__).addHandler(logging.NullHandler())
