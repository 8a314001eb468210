import datetime

import pytest

from sheetsync import SyncConfig, MemoryTableStore
from sheetsync.notify import CollectingNotifier

FIXED_NOW = datetime.datetime(2024, 3, 1, 9, 30, 0)

@pytest.fixture
def clock():
    return lambda: FIXED_NOW

@pytest.fixture
def config():
    return SyncConfig(control_table_name="Control", archive_table_name="Archive",
                      control_range_start=2, control_range_end=20, control_column=1,
                      status_column_index=5, protected_table_names={"Dashboard"},
                      debounce_seconds=0)

@pytest.fixture
def notifier():
    return CollectingNotifier()

@pytest.fixture
def store():
    return MemoryTableStore({
        "Control": [["Tables"], ["A"], ["B"]],
        "Archive": [],
        "A": [["id", "name"], [1, "alpha"]],
        "C": [["id", "name"], [7, "gamma"], [8, "delta"]],
    })

class ManualTimer():
    """Stand in for threading.Timer that only fires when told to"""
    created = []

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.cancelled = False
        self.started = False
        self.daemon = False
        ManualTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function()

@pytest.fixture
def manual_timer():
    ManualTimer.created = []
    return ManualTimer
