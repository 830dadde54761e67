from datetime import datetime, timedelta

from services.errors import PersistenceError
from services.sweep import run_status_sweep, run_full_sweep, sweep_due


def _items():
    return [
        {"id": 1, "status": "active", "expiryDate": "2024-03-09"},
        {"id": 2, "status": "active", "expiryDate": "2024-03-10"},
        {"id": 3, "status": "test", "expiryDate": "2020-01-01"},
        {"id": 4, "status": "active", "expiryDate": "2024-02-01"},
        {"id": 5, "status": "inactive", "expiryDate": "2024-02-01"},
        {"id": 6, "status": "active", "expiryDate": None},
    ]


def test_sweep_writes_only_changed(fake_store, today):
    store = fake_store(items=_items())
    result = run_status_sweep(store, today=today)

    assert result.checked == 6
    assert result.changed == [1, 4]
    assert store.updates == [(1, {"status": "inactive"}), (4, {"status": "inactive"})]
    assert result.ok


def test_sweep_failure_does_not_abort(fake_store, today):
    store = fake_store(items=_items(), fail_ids={1})
    result = run_status_sweep(store, today=today)

    assert result.changed == [4]
    assert list(result.failures) == [1]
    assert not result.ok
    snapshot = {e["id"]: e["status"] for e in result.entities}
    assert snapshot[1] == "active"
    assert snapshot[4] == "inactive"


def test_sweep_uses_given_snapshot(fake_store, today):
    store = fake_store(items=_items())
    result = run_status_sweep(store, [{"id": 1, "status": "active", "expiryDate": "2024-03-01"}], today)
    assert result.checked == 1
    assert result.changed == [1]


def test_second_sweep_is_a_noop(fake_store, today):
    store = fake_store(items=_items())
    run_status_sweep(store, today=today)
    again = run_status_sweep(store, today=today)
    assert again.changed == []
    assert len(store.updates) == 2


class _BrokenStore:
    table = "resellers"

    def get_all(self):
        raise PersistenceError("offline", "resellers")


def test_full_sweep_runs_each_collection(fake_store, today):
    clients = fake_store("clients", _items())
    results = run_full_sweep({"clients": clients, "resellers": _BrokenStore()}, today)

    assert [r.collection for r in results] == ["clients", "resellers"]
    assert results[0].changed == [1, 4]
    assert not results[1].ok


def test_sweep_due():
    now = datetime(2024, 3, 10, 12, 0)
    assert sweep_due(None, now)
    assert not sweep_due(now - timedelta(minutes=59), now)
    assert sweep_due(now - timedelta(hours=1), now)


def test_sweep_writes_overdue_pending_as_inactive(fake_store, today):
    store = fake_store(items=[
        {"id": 9, "status": "pending", "expiryDate": "2024-03-01"},
        {"id": 10, "status": "pending", "expiryDate": "2024-03-20"},
    ])
    result = run_status_sweep(store, today=today)

    assert result.changed == [9]
    assert store.updates == [(9, {"status": "inactive"})]
    assert store.items[10]["status"] == "pending"


class _FlakyStore:
    table = "clients"

    def __init__(self):
        self.updated = []

    def update(self, item_id, fields):
        if item_id == 1:
            raise ValueError("resposta inesperada")
        self.updated.append(item_id)
        return {"id": item_id, **fields}


def test_unexpected_store_error_does_not_abort(today):
    store = _FlakyStore()
    result = run_status_sweep(store, [
        {"id": 1, "status": "active", "expiryDate": "2024-03-01"},
        {"id": 2, "status": "active", "expiryDate": "2024-03-01"},
    ], today)

    assert store.updated == [2]
    assert result.changed == [2]
    assert "ValueError" in result.failures[1]
    assert {e["id"]: e["status"] for e in result.entities} == {1: "active", 2: "inactive"}
