"""
Exception taxonomy.

ConfigurationError is fatal for the invocation that hits it.  TargetNotFound,
ArchiveFailure and DuplicateName are recovered locally by the caller and
reported through the notifier.
"""

__all__ = ["SheetSyncError", "ConfigurationError", "StoreError", "NotFound",
           "AlreadyExists", "DuplicateName", "TargetNotFound", "ArchiveFailure"]

class SheetSyncError(Exception):
    """Base for everything raised by this package"""
    pass

class ConfigurationError(SheetSyncError):
    """Control table missing or invalid configuration values"""
    pass

class StoreError(SheetSyncError):
    """A table store operation failed"""
    pass

class NotFound(StoreError):
    """Named table does not exist"""
    def __init__(self, name: str, message: str = "") -> None:
        self.name = name
        super().__init__(message or f"table not found: {name}")

class AlreadyExists(StoreError):
    """Create on a name that is already taken"""
    def __init__(self, name: str, message: str = "") -> None:
        self.name = name
        super().__init__(message or f"table already exists: {name}")

class DuplicateName(AlreadyExists):
    """A reconcile pass tried to create a table twice"""
    pass

class TargetNotFound(NotFound):
    """A status value that does not name any table"""
    def __init__(self, name: str, source: str = "", row: int = 0) -> None:
        self.source = source
        self.row = row
        msg = f"no table named '{name}'"
        if source:
            msg += f" for row {row} of '{source}', row left in place"
        super().__init__(name, msg)

class ArchiveFailure(SheetSyncError):
    """Writing the archive block failed, the table must not be deleted"""
    def __init__(self, name: str, cause: Exception|None = None) -> None:
        self.name = name
        self.cause = cause
        msg = f"failed to archive '{name}'"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)
