"""
Test configuration and fixtures for the supagate test suite.

``FakeClient`` stands in for the Supabase async client: every builder call is
recorded on a ``FakeQuery`` so tests can assert the exact call sequence the
core produced, and ``execute`` returns canned responses per table.
"""
import logging
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from supagate.api import create_app
from supagate.config import Settings


class FakeQuery:
    """Records PostgREST builder calls and returns itself."""

    def __init__(self, client: "FakeClient", table: str):
        self.client = client
        self.table = table
        self.calls: List[tuple] = []

    def _record(self, name: str, *args, **kwargs) -> "FakeQuery":
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *columns, **kwargs):
        return self._record("select", *columns, **kwargs)

    def insert(self, data, **kwargs):
        return self._record("insert", data, **kwargs)

    def update(self, data, **kwargs):
        return self._record("update", data, **kwargs)

    def delete(self, **kwargs):
        return self._record("delete", **kwargs)

    def eq(self, column, value):
        return self._record("eq", column, value)

    def neq(self, column, value):
        return self._record("neq", column, value)

    def gt(self, column, value):
        return self._record("gt", column, value)

    def gte(self, column, value):
        return self._record("gte", column, value)

    def lt(self, column, value):
        return self._record("lt", column, value)

    def lte(self, column, value):
        return self._record("lte", column, value)

    def like(self, column, pattern):
        return self._record("like", column, pattern)

    def ilike(self, column, pattern):
        return self._record("ilike", column, pattern)

    def in_(self, column, values):
        return self._record("in_", column, values)

    def is_(self, column, value):
        return self._record("is_", column, value)

    @property
    def not_(self):
        return self._record("not_")

    def or_(self, filters):
        return self._record("or_", filters)

    def range(self, start, end):
        return self._record("range", start, end)

    def order(self, column, **kwargs):
        return self._record("order", column, **kwargs)

    def names(self) -> List[str]:
        return [name for name, _, _ in self.calls]

    def filter_calls(self) -> List[tuple]:
        """Calls after the initial select/insert/update/delete, without kwargs."""
        return [(name, *args) for name, args, _ in self.calls[1:]]

    async def execute(self):
        self.client.executed.append(self)
        response = self.client.responses.get(self.table, SimpleNamespace(data=[], count=0))
        if isinstance(response, Exception):
            raise response
        return response


class FakeClient:
    """Minimal stand-in for ``supabase.AsyncClient``."""

    def __init__(self):
        self.queries: List[FakeQuery] = []
        self.executed: List[FakeQuery] = []
        self.responses: Dict[str, Any] = {}

    def table(self, name: str) -> FakeQuery:
        query = FakeQuery(self, name)
        self.queries.append(query)
        return query

    def respond(self, table: str, data=None, count=None):
        self.responses[table] = SimpleNamespace(data=data if data is not None else [], count=count)

    def fail(self, table: str, message: str = "relation does not exist"):
        self.responses[table] = APIError({"message": message, "code": "42P01", "hint": None, "details": None})

    def last_query(self, table: str) -> FakeQuery:
        return [q for q in self.queries if q.table == table][-1]


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def query(fake_client) -> FakeQuery:
    """A builder that has already had ``select("*")`` called on it."""
    return fake_client.table("items").select("*")


@pytest.fixture
def supagate_logs(caplog):
    """caplog wired to the ``supagate`` logger, which may not propagate to root."""
    logger = logging.getLogger("supagate")
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG, logger="supagate")
    yield caplog
    logger.removeHandler(caplog.handler)


@pytest.fixture
def settings() -> Settings:
    return Settings(supabase_url="https://example.supabase.co", supabase_key="test-key", env="test")


@pytest.fixture
def api_client(fake_client, settings) -> TestClient:
    app = create_app(settings=settings, client=fake_client)
    return TestClient(app)
