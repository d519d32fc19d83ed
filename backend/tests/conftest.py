import os
from types import SimpleNamespace
from uuid import uuid4

import pytest

# Use in-memory sqlite for tests; must be set before pushrun is imported
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["TIMEZONE"] = "UTC"

from pushrun.services.errors import StoreError  # noqa: E402


class FakeEntryStore:
    """In-memory EntryStore that records every write."""

    def __init__(self, rows=None, fail_on=()):
        self.rows = {}
        self.writes = []
        self.fail_on = set(fail_on)
        for row in rows or []:
            self._put(dict(row))

    def _put(self, fields):
        fields.setdefault("id", str(uuid4()))
        row = SimpleNamespace(**fields)
        self.rows[row.id] = row
        return row

    def _maybe_fail(self, op):
        if op in self.fail_on:
            raise StoreError("", status=503, data={"message": f"{op} unavailable"})

    def find_one(self, user_id, ymd):
        self._maybe_fail("find_one")
        for row in self.rows.values():
            if row.user_id == user_id and row.ymd == ymd:
                return row
        return None

    def find_all(self, user_id):
        self._maybe_fail("find_all")
        return [r for r in self.rows.values() if r.user_id == user_id]

    def create(self, fields):
        self._maybe_fail("create")
        self.writes.append(("create", dict(fields)))
        return self._put(dict(fields))

    def update(self, entry_id, fields):
        self._maybe_fail("update")
        self.writes.append(("update", entry_id, dict(fields)))
        row = self.rows[entry_id]
        for key, value in fields.items():
            setattr(row, key, value)
        return row


class FakeSettingsStore:
    def __init__(self, rows=None):
        self.rows = [SimpleNamespace(**r) for r in rows or []]
        self.created = []

    def find_one(self, user_id):
        for row in self.rows:
            if row.user_id == user_id:
                return row
        return None

    def create(self, fields):
        row = SimpleNamespace(id=str(uuid4()), **fields)
        self.rows.append(row)
        self.created.append(row)
        return row


@pytest.fixture
def make_entry_store():
    return FakeEntryStore


@pytest.fixture
def make_settings_store():
    return FakeSettingsStore


@pytest.fixture
def client():
    from fastapi.testclient import TestClient  # noqa: WPS433
    from pushrun.db import Base, engine
    from pushrun.main import app

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    # https so the secure auth cookie is sent back
    with TestClient(app, base_url="https://testserver") as c:
        yield c


@pytest.fixture
def logged_in_client(client):
    r = client.post(
        "/login/register",
        data={"email": "runner@example.com", "password": "hunter22!", "passwordConfirm": "hunter22!"},
        follow_redirects=False,
    )
    assert r.status_code == 303, r.text
    return client
