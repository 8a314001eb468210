from dataclasses import dataclass, field
from functools import partial
from typing import Callable
import logging
import threading

from .cells import CellValue

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class CellChangedEvent():
    """
    A single cell edit.  row and column are 1-based.
    """
    table: str
    row: int
    column: int
    value: CellValue = field(default_factory=CellValue)
    old_value: CellValue = field(default_factory=CellValue)

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", CellValue.of(self.value))
        object.__setattr__(self, "old_value", CellValue.of(self.old_value))
        if self.row < 1 or self.column < 1:
            raise ValueError(f"Invalid cell coordinates: row {self.row}, column {self.column}")

    @classmethod
    def from_dict(cls, payload: dict) -> "CellChangedEvent":
        """
        Build from either our own field names or the shape an Apps Script
        onEdit trigger would forward (sheetName, rowStart/columnStart or
        row/column, value, oldValue).
        """
        p = dict(payload)
        table = p.get("table", p.get("sheetName", p.get("sheet", "")))
        row = p.get("row", p.get("rowStart", 0))
        column = p.get("column", p.get("columnStart", p.get("col", 0)))
        old = p.get("old_value", p.get("oldValue", None))
        if not table:
            raise ValueError("edit event is missing the table name")
        return cls(str(table), int(row), int(column), p.get("value", None), old)

Handler = Callable[[CellChangedEvent], None]

class Debouncer():
    """
    Coalesce a burst of triggers into one call of callback, delay seconds
    after the last trigger.  Nothing is queued: the callback runs once no
    matter how many triggers landed in the window and it is expected to
    read whatever the current state is when it runs.

    A delay of 0 runs the callback straight away on the calling thread.
    timer_factory has threading.Timer's signature and is there so tests
    can drive time by hand.
    """
    def __init__(self, delay: float, callback: Callable[[], None],
                 timer_factory: Callable = threading.Timer) -> None:
        if delay < 0:
            raise ValueError("Debouncer delay must be >= 0")
        self._delay = delay
        self._callback = callback
        self._timer_factory = timer_factory
        self._timer = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def trigger(self) -> None:
        if not self._delay:
            self._callback()
            return
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._timer = self._timer_factory(self._delay, partial(self._fire, self._generation))
            self._timer.daemon = True
            self._timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            # a timer that was superseded or cancelled after it started firing
            if generation != self._generation or self._timer is None:
                return
            self._timer = None
        self._callback()

    def cancel(self) -> bool:
        """Drop a pending call, True if there was one"""
        with self._lock:
            t, self._timer = self._timer, None
        if t is not None:
            t.cancel()
            return True
        return False

    def flush(self) -> bool:
        """Run a pending call now instead of waiting, True if there was one"""
        if self.cancel():
            self._callback()
            return True
        return False
