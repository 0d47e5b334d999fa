"""
Shared test infrastructure.

In-memory stand-ins for the Supabase client (tables, auth, storage) so the
API and services run without a network.
"""

import copy
import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from humanizer.config import Settings, get_settings
from humanizer.main import app
from humanizer.middleware.auth import get_supabase_client


TEST_USER_ID = "00000000-0000-0000-0000-000000000001"
TEST_EMAIL = "test@example.com"
TEST_TOKEN = "valid-test-token"

AI_TEXT = (
    "We utilize advanced methods to process the data. Subsequently, the results "
    "are verified by our team of experts."
)


# =============================================================================
# MOCK SUPABASE
# =============================================================================

class MockSupabaseResponse:
    def __init__(self, data):
        self.data = data


class MockQuery:
    def __init__(self, db: "MockSupabaseClient", name: str):
        self.db = db
        self.name = name
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.descending = False
        self.max_rows = None

    def select(self, *args, **kwargs):
        self.op = "select"
        return self

    def insert(self, data):
        self.op = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.op = "update"
        self.payload = data
        return self

    def upsert(self, data):
        self.op = "upsert"
        self.payload = data
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = column
        self.descending = desc
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    def _matches(self, row):
        return all(str(row.get(col)) == str(val) for col, val in self.filters)

    def execute(self):
        self.db.calls.append((self.name, self.op))
        if (self.name, self.op) in self.db.failures:
            raise RuntimeError(f"simulated {self.op} failure on {self.name}")

        rows = self.db.tables.setdefault(self.name, [])

        if self.op in ("insert", "upsert"):
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            written = []
            for payload in payloads:
                existing = None
                if self.op == "upsert" and "id" in payload:
                    existing = next((r for r in rows if r.get("id") == payload["id"]), None)
                if existing is not None:
                    existing.update(payload)
                    written.append(copy.deepcopy(existing))
                    continue
                row = {
                    "id": str(uuid.uuid4()),
                    "created_at": datetime.now(timezone.utc).isoformat(),
                    **payload
                }
                rows.append(row)
                written.append(copy.deepcopy(row))
            return MockSupabaseResponse(written)

        matched = [r for r in rows if self._matches(r)]

        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return MockSupabaseResponse([copy.deepcopy(r) for r in matched])

        if self.op == "delete":
            self.db.tables[self.name] = [r for r in rows if not self._matches(r)]
            return MockSupabaseResponse([copy.deepcopy(r) for r in matched])

        if self.order_by:
            matched = sorted(
                matched,
                key=lambda r: r.get(self.order_by) or "",
                reverse=self.descending
            )
        if self.max_rows is not None:
            matched = matched[:self.max_rows]
        return MockSupabaseResponse([copy.deepcopy(r) for r in matched])


class MockUser:
    def __init__(self, user_id, email):
        self.id = user_id
        self.email = email


class MockAuthResult:
    def __init__(self, user):
        self.user = user


class MockAuth:
    def __init__(self):
        self.tokens = {TEST_TOKEN: MockUser(TEST_USER_ID, TEST_EMAIL)}

    def get_user(self, token):
        if token not in self.tokens:
            raise RuntimeError("invalid JWT")
        return MockAuthResult(self.tokens[token])


class MockBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, data, file_options=None):
        self.storage.files[(self.name, path)] = data
        return {"path": path}

    def get_public_url(self, path):
        return f"https://storage.example.com/{self.name}/{path}"


class MockStorage:
    def __init__(self):
        self.files = {}

    def from_(self, bucket):
        return MockBucket(self, bucket)


class MockSupabaseClient:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failures = set()
        self.auth = MockAuth()
        self.storage = MockStorage()

    def table(self, name):
        return MockQuery(self, name)

    def fail(self, table, op):
        """Make every `op` on `table` raise."""
        self.failures.add((table, op))

    def add_profile(self, user_id=TEST_USER_ID, credits_used=0, credits_total=10, plan="free"):
        self.tables.setdefault("profiles", []).append({
            "id": user_id,
            "username": "test",
            "credits_used": credits_used,
            "credits_total": credits_total,
            "plan": plan,
            "created_at": datetime.now(timezone.utc).isoformat(),
        })

    def profile(self, user_id=TEST_USER_ID):
        return next(r for r in self.tables["profiles"] if r["id"] == user_id)

    def rows(self, table):
        return self.tables.get(table, [])


# =============================================================================
# FIXTURES
# =============================================================================

def get_test_settings():
    return Settings(
        supabase_url="https://example.supabase.co",
        undetectable_api_key="",
        openai_api_key="",
        rewrite_service_url="",
        fallback_randomness=False
    )


@pytest.fixture
def supabase():
    db = MockSupabaseClient()
    db.add_profile()
    return db


@pytest.fixture
def client(supabase):
    app.dependency_overrides[get_settings] = get_test_settings
    app.dependency_overrides[get_supabase_client] = lambda: supabase
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TEST_TOKEN}"}
