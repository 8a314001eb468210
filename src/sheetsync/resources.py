from dataclasses import asdict

class SheetSyncResourceBase():
    """
    Mixin for the package's dataclasses: the config, the result records and
    the Sheets API request/resource structs.  to_base() is the plain dict the
    API client or a json file wants, after fixup() has put the fields into
    their canonical types.
    """
    def to_base(self) -> dict:
        """
        Default is the dataclass as a dict.  Request types with a nested
        or renamed layout override this.
        """
        self.fixup()
        return asdict(self)

    def fixup(self) -> None:
        """
        Hook for a subclass to coerce field values, called before to_base()
        """
        pass
