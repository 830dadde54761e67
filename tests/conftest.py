from datetime import date

import pytest

from services.errors import PersistenceError


class FakeStore:
    """Store em memória com o mesmo contrato do TableStore."""

    def __init__(self, table="clients", items=None, fail_ids=()):
        self.table = table
        self.items = {i["id"]: dict(i) for i in (items or [])}
        self.fail_ids = set(fail_ids)
        self.updates = []

    def get_all(self):
        return [dict(i) for i in self.items.values()]

    def update(self, item_id, fields):
        if item_id in self.fail_ids:
            raise PersistenceError("falha simulada", self.table, item_id)
        self.updates.append((item_id, dict(fields)))
        self.items[item_id].update(fields)
        return dict(self.items[item_id])


@pytest.fixture
def today():
    return date(2024, 3, 10)


@pytest.fixture
def plans():
    return [
        {"id": 1, "name": "Mensal", "price": "35.00", "duration": "30"},
        {"id": 2, "name": "Trimestral", "price": "90.00", "duration": "90"},
        {"id": 3, "name": "Quinzena", "price": "20.00", "duration": "45"},
        {"id": 4, "name": "Sem duração", "price": "10.00", "duration": ""},
    ]


@pytest.fixture
def fake_store():
    return FakeStore
