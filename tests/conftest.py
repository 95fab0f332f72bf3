"""Pytest configuration and fixtures."""

import copy
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from waitify.core.entitlements import get_subscription_status
from waitify.core.features import get_plan
from waitify.core.security import get_current_user, require_auth
from waitify.main import app
from waitify.services.billing import INACTIVE_SUBSCRIPTION


# ============================================
# In-memory Supabase client
# ============================================

class FakeResult:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Subset of the PostgREST query builder used by the repositories.

    Embedded resources in select strings are ignored: rows come back flat.
    """

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.orders = []
        self.limit_to = None
        self.count_mode = None

    def select(self, columns="*", count=None):
        self.op = "select"
        self.count_mode = count
        return self

    def insert(self, data):
        self.op = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.op = "update"
        self.payload = data
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def limit(self, n):
        self.limit_to = n
        return self

    def _matching(self) -> list[dict]:
        return [r for r in self.db.rows(self.table) if all(f(r) for f in self.filters)]

    def execute(self) -> FakeResult:
        if self.op == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = [self.db.insert(self.table, item) for item in items]
            return FakeResult(copy.deepcopy(inserted))

        rows = self._matching()

        if self.op == "update":
            for row in rows:
                row.update(copy.deepcopy(self.payload))
            return FakeResult(copy.deepcopy(rows))

        if self.op == "delete":
            table = self.db.rows(self.table)
            doomed = {id(r) for r in rows}
            table[:] = [r for r in table if id(r) not in doomed]
            return FakeResult(copy.deepcopy(rows))

        for column, desc in reversed(self.orders):
            rows.sort(key=lambda r: (r.get(column) is None, r.get(column) if r.get(column) is not None else 0), reverse=desc)
        count = len(rows) if self.count_mode == "exact" else None
        if self.limit_to is not None:
            rows = rows[: self.limit_to]
        return FakeResult(copy.deepcopy(rows), count=count)


class FakeRpc:
    def __init__(self, db: "FakeSupabase", name: str, params: dict):
        self.db = db
        self.name = name
        self.params = params

    def execute(self) -> FakeResult:
        if self.name != "add_waitlist_entry":
            raise NotImplementedError(self.name)

        waitlist_id = self.params["p_waitlist_id"]
        waitlist = next((w for w in self.db.rows("waitlists") if w["id"] == waitlist_id), None)
        if waitlist is None:
            raise Exception(f"waitlist {waitlist_id} not found")

        position = waitlist.get("next_position", 1)
        waitlist["next_position"] = position + 1

        entry = {"status": "waiting", **self.params["p_entry"]}
        entry["waitlist_id"] = waitlist_id
        entry["position"] = position
        return FakeResult([copy.deepcopy(self.db.insert("waitlist_entries", entry))])


class FakeBucket:
    def __init__(self, db: "FakeSupabase", bucket: str):
        self.db = db
        self.bucket = bucket

    def upload(self, path, file, file_options=None):
        objects = self.db.objects.setdefault(self.bucket, {})
        if path in objects and (file_options or {}).get("upsert") != "true":
            raise Exception("The resource already exists")
        objects[path] = {"data": file, "options": file_options}
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://storage.test/{self.bucket}/{path}"

    def remove(self, paths):
        objects = self.db.objects.setdefault(self.bucket, {})
        for path in paths:
            objects.pop(path, None)
        return []


class FakeStorage:
    def __init__(self, db: "FakeSupabase"):
        self.db = db

    def from_(self, bucket):
        return FakeBucket(self.db, bucket)


class FakeAuthAdmin:
    def __init__(self, db: "FakeSupabase"):
        self.db = db

    def get_user_by_id(self, user_id):
        email = self.db.auth_users.get(user_id)
        if email is None:
            raise Exception("User not found")
        return SimpleNamespace(user=SimpleNamespace(id=user_id, email=email))


class FakeSupabase:
    """Just enough of supabase.Client for the repositories and services."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.objects: dict[str, dict] = {}
        self.auth_users: dict[str, str] = {}
        self.storage = FakeStorage(self)
        self.auth = SimpleNamespace(admin=FakeAuthAdmin(self))

    def rows(self, table: str) -> list[dict]:
        return self.tables.setdefault(table, [])

    def insert(self, table: str, data: dict) -> dict:
        row = copy.deepcopy(data)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        self.rows(table).append(row)
        return row

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict) -> FakeRpc:
        return FakeRpc(self, name, params)



# ============================================
# Fixtures
# ============================================

@pytest.fixture
def fake_db(monkeypatch) -> FakeSupabase:
    """Route every repository call to an in-memory database."""
    db = FakeSupabase()
    monkeypatch.setattr("database.supabase_client.get_supabase_client", lambda: db)
    return db


@pytest.fixture
def client(fake_db: FakeSupabase) -> Generator[TestClient, None, None]:
    """Test client on the free tier with nobody signed in."""
    app.dependency_overrides[get_subscription_status] = lambda: dict(INACTIVE_SUBSCRIPTION)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_profile(fake_db: FakeSupabase):
    """Create a profile row plus its auth user email."""
    def _make(role: str = "customer", email: str | None = None, **fields) -> dict:
        profile = fake_db.insert("profiles", {"role": role, **fields})
        fake_db.auth_users[profile["id"]] = email or f"{profile['id'][:8]}@example.com"
        return profile
    return _make


@pytest.fixture
def login(fake_db: FakeSupabase):
    """Sign a profile in by overriding JWT verification."""
    def _login(profile: dict) -> dict:
        payload = {
            "sub": profile["id"],
            "email": fake_db.auth_users.get(profile["id"]),
            "aud": "authenticated",
        }
        app.dependency_overrides[require_auth] = lambda: payload
        app.dependency_overrides[get_current_user] = lambda: payload
        return payload
    return _login


@pytest.fixture
def set_plan():
    """Pretend the signed-in business is subscribed to a plan (None = free)."""
    def _set(plan_id: str | None):
        if plan_id:
            subscription = {**INACTIVE_SUBSCRIPTION, "active": True, "plan": get_plan(plan_id)}
        else:
            subscription = dict(INACTIVE_SUBSCRIPTION)
        app.dependency_overrides[get_subscription_status] = lambda: subscription
    return _set


@pytest.fixture
def business(make_profile) -> dict:
    return make_profile(
        "business",
        email="owner@luigis.test",
        business_name="Luigi's",
        business_type="restaurant",
    )


@pytest.fixture
def customer(make_profile) -> dict:
    return make_profile(
        "customer",
        email="ana@example.com",
        first_name="Ana",
        last_name="Lopez",
        phone_number="+15550100",
    )


@pytest.fixture
def business_client(client: TestClient, login, business: dict) -> TestClient:
    """Client signed in as the business owner."""
    login(business)
    return client


@pytest.fixture
def waitlist(fake_db: FakeSupabase, business: dict) -> dict:
    return fake_db.insert("waitlists", {
        "business_id": business["id"],
        "name": "Dinner",
        "description": "Evening seating",
        "max_capacity": None,
        "is_active": True,
        "next_position": 1,
    })
