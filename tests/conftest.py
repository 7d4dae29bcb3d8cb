"""Shared fixtures: an in-memory stand-in for the Supabase client"""
import os

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("LOG_FILE", os.devnull)
os.environ["RECOMMENDATION_BACKEND"] = "edge_function"

import asyncio
from datetime import datetime, timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from roamly.main import app
from roamly.utils.database import get_supabase_client


class FakeAPIError(Exception):
    def __init__(self, message):
        self.message = message
        super().__init__(message)


class FakeResult:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.filters = []
        self.order_by = None
        self.payload = None

    def select(self, columns="*"):
        self.op = "select"
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def execute(self):
        self.db.calls.append({
            "table": self.table,
            "op": self.op,
            "filters": list(self.filters),
            "order": self.order_by,
        })
        if (self.table, self.op) in self.db.failures:
            raise FakeAPIError(self.db.failures[(self.table, self.op)])

        rows = self.db.tables.setdefault(self.table, [])
        if self.op == "insert":
            row = self.db.make_row(self.payload)
            rows.append(row)
            return FakeResult([dict(row)])

        matched = [r for r in rows if all(r.get(c) == v for c, v in self.filters)]
        if self.op == "delete":
            for row in matched:
                rows.remove(row)
            return FakeResult([dict(r) for r in matched])

        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda r: str(r.get(column) or ""), reverse=desc)
        return FakeResult([dict(r) for r in matched])


class FakeDatabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failures = {}
        self._clock = datetime(2024, 1, 1, 12, 0, 0)

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, op, message="database unavailable"):
        self.failures[(table, op)] = message

    def make_row(self, payload):
        self._clock += timedelta(minutes=1)
        row = {"id": str(uuid4()), "created_at": self._clock.isoformat()}
        row.update(payload)
        return row

    def seed(self, table, **payload):
        row = self.make_row(payload)
        self.tables.setdefault(table, []).append(row)
        return row

    def calls_for(self, table, op):
        return [c for c in self.calls if c["table"] == table and c["op"] == op]


class FakeSubscription:
    def __init__(self, auth, callback):
        self.auth = auth
        self.callback = callback

    def unsubscribe(self):
        if self in self.auth.subscriptions:
            self.auth.subscriptions.remove(self)


def on_event_loop():
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def make_session(user_id, email, full_name=None, access_token=None, refresh_token=None):
    user = SimpleNamespace(
        id=user_id,
        email=email,
        user_metadata={"full_name": full_name} if full_name else {}
    )
    return SimpleNamespace(
        user=user,
        access_token=access_token or f"token-{user_id}",
        refresh_token=refresh_token or f"refresh-{user_id}"
    )


class FakeAuth:
    def __init__(self):
        self.tokens = {}
        self.passwords = {}
        self.current = None
        self.subscriptions = []
        self.sign_out_error = None
        self.get_session_error = None
        self.signed_out = False
        # Blocking calls made from a running event loop
        self.loop_calls = []

    def _record(self, name):
        if on_event_loop():
            self.loop_calls.append(name)

    def add_user(self, user_id, email, full_name=None, access_token=None, password="secret-pass"):
        session = make_session(user_id, email, full_name, access_token)
        self.tokens[session.access_token] = session
        self.passwords[email] = password
        return session

    def emit(self, event, session):
        for subscription in list(self.subscriptions):
            subscription.callback(event, session)

    def set_session(self, access_token, refresh_token):
        self._record("set_session")
        if access_token not in self.tokens:
            raise FakeAPIError("Invalid JWT")
        self.current = self.tokens[access_token]
        event = "TOKEN_REFRESHED" if self.current.access_token != access_token else "SIGNED_IN"
        self.emit(event, self.current)
        return SimpleNamespace(user=self.current.user, session=self.current)

    def get_session(self):
        self._record("get_session")
        if self.get_session_error:
            raise FakeAPIError(self.get_session_error)
        return self.current

    def on_auth_state_change(self, callback):
        subscription = FakeSubscription(self, callback)
        self.subscriptions.append(subscription)
        return subscription

    def sign_out(self):
        self._record("sign_out")
        if self.sign_out_error:
            raise FakeAPIError(self.sign_out_error)
        self.signed_out = True
        self.current = None
        self.emit("SIGNED_OUT", None)

    def sign_in_with_password(self, credentials):
        self._record("sign_in_with_password")
        email = credentials["email"]
        if self.passwords.get(email) != credentials["password"]:
            raise FakeAPIError("Invalid login credentials")
        for session in self.tokens.values():
            if session.user.email == email:
                self.current = session
                self.emit("SIGNED_IN", session)
                return SimpleNamespace(user=session.user, session=session)
        raise FakeAPIError("Invalid login credentials")

    def sign_up(self, credentials):
        self._record("sign_up")
        full_name = credentials.get("options", {}).get("data", {}).get("full_name")
        session = self.add_user(str(uuid4()), credentials["email"], full_name, password=credentials["password"])
        return SimpleNamespace(user=session.user, session=session)


class FakeFunctions:
    def __init__(self):
        self.invocations = []
        self.response = {"recommendations": "Day 1: ..."}
        self.error = None

    def invoke(self, function_name, invoke_options=None):
        self.invocations.append((function_name, invoke_options))
        if self.error:
            raise self.error
        return self.response


class FakeSupabase:
    def __init__(self):
        self.db = FakeDatabase()
        self.auth = FakeAuth()
        self.functions = FakeFunctions()

    def table(self, name):
        return self.db.table(name)


ALICE_ID = "user-alice"
BOB_ID = "user-bob"


@pytest.fixture
def supabase():
    fake = FakeSupabase()
    fake.auth.add_user(ALICE_ID, "alice@example.com", "Alice Traveller")
    fake.auth.add_user(BOB_ID, "bob@example.com")
    return fake


@pytest.fixture
def alice_headers():
    return {"Authorization": f"Bearer token-{ALICE_ID}"}


@pytest.fixture
def api(supabase):
    def fresh_client():
        # a real client is built per request, with no session until restored
        supabase.auth.current = None
        return supabase

    app.dependency_overrides[get_supabase_client] = fresh_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
