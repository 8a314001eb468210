from dataclasses import dataclass, field, fields
from pathlib import Path
import json
import logging

from .resources import SheetSyncResourceBase
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

@dataclass
class SyncConfig(SheetSyncResourceBase):
    """
    Everything the reconciler, migrator and engine need to know about the
    layout of the spreadsheet.  All row/column indices are 1-based like A1.

    control_table_name:     Table holding the declared list of table names.
    archive_table_name:     Table that receives a snapshot of every deleted table.
    control_range_start:    First row of the name list in the control table.
    control_range_end:      Last row (inclusive) of the name list.
    control_column:         Column of the name list.
    status_column_index:    Column whose value names the table a row belongs in.
    protected_table_names:  Tables the reconciler never touches and rows are
                            never moved into.  The control and archive tables
                            are always protected whether listed or not.
    header_rows:            Rows at the top of each working table never migrated.
    debounce_seconds:       Delay before reconciling after a control range edit.
    relocate_on_same_table: Setting a row's status to its own table moves it to the
                            bottom when True, ignored when False.
    create_archive_table:   Create the archive table on first use if it is missing.
    """
    control_table_name: str = field(default="Control")
    archive_table_name: str = field(default="Archive")
    control_range_start: int = field(default=2)
    control_range_end: int = field(default=100)
    control_column: int = field(default=1)
    status_column_index: int = field(default=5)
    protected_table_names: set[str] = field(default_factory=set)
    header_rows: int = field(default=1)
    debounce_seconds: float = field(default=0.5)
    relocate_on_same_table: bool = field(default=False)
    create_archive_table: bool = field(default=True)

    # the language neutral option names map onto the fields
    _ALIASES = {
        "controlTableName": "control_table_name",
        "archiveTableName": "archive_table_name",
        "controlRangeStart": "control_range_start",
        "controlRangeEnd": "control_range_end",
        "controlColumn": "control_column",
        "statusColumnIndex": "status_column_index",
        "protectedTableNames": "protected_table_names",
        "headerRows": "header_rows",
        "debounceSeconds": "debounce_seconds",
        "relocateOnSameTable": "relocate_on_same_table",
        "createArchiveTable": "create_archive_table",
    }

    def __post_init__(self) -> None:
        self.fixup()
        self.validate()

    def fixup(self) -> None:
        if isinstance(self.protected_table_names, str):
            self.protected_table_names = [self.protected_table_names]
        self.protected_table_names = {str(n) for n in (self.protected_table_names or [])}
        for name in ["control_range_start", "control_range_end", "control_column",
                     "status_column_index", "header_rows"]:
            setattr(self, name, int(getattr(self, name)))
        self.debounce_seconds = float(self.debounce_seconds)

    def to_base(self) -> dict:
        self.fixup()
        b = super().to_base()
        # sets dont survive json
        b['protected_table_names'] = sorted(self.protected_table_names)
        return b

    def validate(self) -> None:
        """Raise ConfigurationError on anything that makes no sense"""
        if not str(self.control_table_name).strip():
            raise ConfigurationError("control_table_name must not be empty")
        if not str(self.archive_table_name).strip():
            raise ConfigurationError("archive_table_name must not be empty")
        if self.control_table_name == self.archive_table_name:
            raise ConfigurationError("control and archive tables must be different tables")
        for name in ["control_range_start", "control_range_end", "control_column", "status_column_index"]:
            if getattr(self, name) < 1:
                raise ConfigurationError(f"{name} must be >= 1, not {getattr(self, name)}")
        if self.control_range_end < self.control_range_start:
            raise ConfigurationError("control_range_end must not be before control_range_start")
        if self.header_rows < 0:
            raise ConfigurationError("header_rows must be >= 0")
        if self.debounce_seconds < 0:
            raise ConfigurationError("debounce_seconds must be >= 0")

    @property
    def protected(self) -> set[str]:
        """Full set of names the reconciler must leave alone"""
        return self.protected_table_names | {self.control_table_name, self.archive_table_name}

    def in_control_range(self, row: int, column: int) -> bool:
        return column == self.control_column and self.control_range_start <= row <= self.control_range_end

    @classmethod
    def from_dict(cls, config: dict) -> "SyncConfig":
        """
        Build from a dict as pulled from a json, toml, etc, file.
        Both snake_case field names and the camelCase option names are accepted,
        anything else is ignored with a log entry.
        """
        names = {f.name for f in fields(cls)}
        kwargs = {}
        for k, v in dict(config).items():
            key = cls._ALIASES.get(k, k)
            if key in names:
                kwargs[key] = v
            else:
                logger.debug("ignoring unknown config option: %s", k)
        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid configuration: {e}") from e

    @classmethod
    def from_file(cls, path: Path|str) -> "SyncConfig":
        p = path if isinstance(path, Path) else Path(str(path))
        if not (p.exists() and p.is_file()):
            raise ConfigurationError(f"config file not found: {p}")
        with open(p.resolve(), 'r', encoding='utf-8') as f:
            try:
                j = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"config file {p} is not valid json: {e}") from e
        if not isinstance(j, dict):
            raise ConfigurationError(f"config file {p} must hold a json object")
        return cls.from_dict(j)

    def save(self, path: Path|str) -> None:
        p = path if isinstance(path, Path) else Path(str(path))
        with open(p.resolve(), 'w', encoding='utf-8') as f:
            json.dump(self.to_base(), f, ensure_ascii=False, indent=2)
