import pytest

from sheetsync import (Reconciler, ArchiveWriter, MemoryTableStore, SyncConfig,
                       ArchiveFailure, AlreadyExists)

def make_reconciler(store, config, notifier, clock):
    return Reconciler(store, config, ArchiveWriter(store, config.archive_table_name, clock), notifier)

def test_read_control_list(config, notifier, clock):
    store = MemoryTableStore({
        "Control": [["Tables"], [" A "], [None], ["B"], [3], [""]],
    })
    r = make_reconciler(store, config, notifier, clock)
    assert(r.read_control_list() == ["A", "B", "3"])

def test_control_range_bounds(notifier, clock):
    config = SyncConfig(control_range_start=2, control_range_end=3, control_column=2)
    store = MemoryTableStore({"Control": [["x", "hdr"], ["x", "A"], ["x", "B"], ["x", "C"]]})
    r = Reconciler(store, config, notifier=notifier)
    assert(r.read_control_list() == ["A", "B"])

def test_scenario(store, config, notifier, clock):
    """control list A,B with existing A,C: B created, C archived then deleted"""
    r = make_reconciler(store, config, notifier, clock)
    result = r.reconcile()
    assert(result.ok)
    assert(result.created == ["B"])
    assert(result.deleted == ["C"])
    assert(result.archived == ["C"])
    assert(set(store.list_tables()) == {"Control", "Archive", "A", "B"})
    # new tables go on the end
    assert(store.list_tables()[-1] == "B")
    archive = store.get_rows("Archive")
    assert(archive[0][0].value is not None)
    assert(archive[0][1].as_text() == "C")
    assert([[c.to_python() for c in row] for row in archive[1:4]] == [["id", "name"], [7, "gamma"], [8, "delta"]])
    assert(len(notifier) == 0)

def test_idempotent(store, config, notifier, clock):
    r = make_reconciler(store, config, notifier, clock)
    r.reconcile()
    before = store.snapshot()
    again = r.reconcile()
    assert(again.created == [] and again.deleted == [])
    assert(not again.changed)
    assert(store.snapshot() == before)

@pytest.mark.parametrize("declared,existing", [
    (["A", "B"], ["A", "C"]),
    ([], ["A", "B", "C"]),
    (["X", "Y", "Z"], []),
    (["A"], ["A"]),
    (["B", "A", "D"], ["D", "E", "A"]),
])
def test_creates_and_deletes_exactly_the_difference(declared, existing, config, notifier, clock):
    tables = {"Control": [["Tables"]] + [[n] for n in declared], "Archive": [], "Dashboard": [["keep"]]}
    for n in existing:
        tables[n] = [[n]]
    store = MemoryTableStore(tables)
    result = make_reconciler(store, config, notifier, clock).reconcile()
    assert(result.created == [n for n in declared if n not in existing])
    assert(sorted(result.deleted) == sorted(n for n in existing if n not in declared))
    assert(set(store.list_tables()) == set(declared) | {"Control", "Archive", "Dashboard"})

def test_protected_never_touched(config, notifier, clock):
    # Dashboard is protected and unlisted, Archive is listed but already exists
    store = MemoryTableStore({"Control": [["Tables"], ["Archive"], ["Control"]], "Archive": [], "Dashboard": [[1]]})
    result = make_reconciler(store, config, notifier, clock).reconcile()
    assert(result.created == [] and result.deleted == [])
    assert(store.has_table("Dashboard"))

def test_protected_not_created(config, notifier, clock):
    store = MemoryTableStore({"Control": [["Tables"], ["Dashboard"], ["Archive"]]})
    result = make_reconciler(store, config, notifier, clock).reconcile()
    assert(result.created == [])
    assert(store.list_tables() == ["Control"])

def test_archive_failure_keeps_table(store, config, notifier, clock):
    class FailingWriter(ArchiveWriter):
        def archive(self, table_name):
            raise ArchiveFailure(table_name, RuntimeError("disk full"))

    r = Reconciler(store, config, FailingWriter(store, "Archive", clock), notifier)
    result = r.reconcile()
    assert(store.has_table("C"))
    assert(result.deleted == [])
    assert(result.created == ["B"])
    assert(not result.ok)
    assert(len(notifier) == 1 and "'C' was not deleted" in notifier.messages[0])

def test_archive_store_failure_keeps_table(store, config, notifier, clock):
    store.fail_on.add("append_rows")
    result = make_reconciler(store, config, notifier, clock).reconcile()
    assert(store.has_table("C"))
    assert(store.snapshot()["C"] == [["id", "name"], [7, "gamma"], [8, "delta"]])
    assert(store.get_rows("Archive") == [])
    assert(len(result.errors) == 1)

def test_delete_only_after_archive(store, config, notifier, clock):
    calls = []

    class RecordingStore(MemoryTableStore):
        def append_rows(self, name, rows, styles=None):
            calls.append(("append", name))
            return super().append_rows(name, rows, styles)

        def delete_table(self, name):
            calls.append(("delete", name))
            return super().delete_table(name)

    rs = RecordingStore({"Control": [["Tables"], ["A"]], "Archive": [], "A": [], "C": [[1]]})
    make_reconciler(rs, config, notifier, clock).reconcile()
    # the constructor's own appends are not part of the pass
    pass_calls = calls[calls.index(("append", "Archive")):]
    assert(pass_calls == [("append", "Archive"), ("delete", "C")])

def test_duplicates_in_control_list(config, notifier, clock):
    store = MemoryTableStore({"Control": [["Tables"], ["B"], ["B"], ["A"]], "Archive": []})
    result = make_reconciler(store, config, notifier, clock).reconcile()
    assert(result.created == ["B", "A"])
    assert(result.skipped == ["B"])
    assert(result.ok)

def test_already_exists_is_skipped(store, config, notifier, clock):
    class RacyStore(MemoryTableStore):
        racing = False

        def create_table(self, name):
            # somebody else made it between the snapshot and the create
            if self.racing:
                raise AlreadyExists(name)
            super().create_table(name)

    rs = RacyStore({"Control": [["Tables"], ["New"]], "Archive": []})
    rs.racing = True
    result = make_reconciler(rs, config, notifier, clock).reconcile()
    assert(result.created == [])
    assert(result.skipped == ["New"])
    assert(result.ok)

def test_missing_control_table(config, notifier, clock):
    store = MemoryTableStore({"Archive": [], "A": [[1]], "B": [[2]]})
    result = make_reconciler(store, config, notifier, clock).reconcile()
    assert(not result.ok)
    assert(not result.changed)
    assert(set(store.list_tables()) == {"Archive", "A", "B"})
    assert("control table 'Control' is missing" in notifier.messages[0])

def test_explicit_control_list(store, config, notifier, clock):
    result = make_reconciler(store, config, notifier, clock).reconcile(["A", "C", " "])
    assert(result.created == [] and result.deleted == [])
