import os

# Must be set before app.core.config is imported.
os.environ.setdefault("VARIANTS_DATASET", "variants-test")
os.environ["BEACON_INFO_FILE"] = ""

import pytest
from fastapi.testclient import TestClient

from app.core.config import get_query_policy
from app.core.query import QueryMode, QueryPolicy
from app.db.executor import get_executor
from app.main import app


class FakeExecutor:
    """Stands in for a query backend and records what it was asked."""

    def __init__(self, result=1, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def count(self, predicate, table_id, project_id=None):
        self.calls.append((predicate, table_id, project_id))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def policy():
    return QueryPolicy()


@pytest.fixture
def executor():
    fake = FakeExecutor()
    app.dependency_overrides[get_executor] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


@pytest.fixture
def client(executor):
    return TestClient(app)


@pytest.fixture
def legacy_mode(executor):
    app.dependency_overrides[get_query_policy] = lambda: QueryPolicy(mode=QueryMode.LEGACY)
