"""
Global test fixtures for XQuery Autostart.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- A document store broker on top of the mock database
- A fake query runtime that records contexts, executions and cleanups
- Helpers to store scripts in the database
"""

import sys
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))


TEST_DB_NAME = "exist_test"


# =============================================================================
# Fake Query Runtime
# =============================================================================

class FakeResult:
    """Query result whose string value is fixed."""

    def __init__(self, value: str):
        self.value = value

    def get_string_value(self) -> str:
        return self.value


class FakeCompiled:
    def __init__(self, source, context):
        self.source = source
        self.context = context


class FakeContext:
    """Query context that records how the trigger drives it."""

    def __init__(self, access):
        self.access = access
        self.module_load_path: Optional[str] = None
        self.prepared = False
        self.cleanup_calls = 0

    def set_module_load_path(self, path: str) -> None:
        self.module_load_path = path

    def prepare_for_execution(self) -> None:
        self.prepared = True

    def run_cleanup_tasks(self) -> None:
        self.cleanup_calls += 1


class FakeQueryService:
    """
    Query runtime driven by script content.

    - content starting with "compile-error" fails at compile time
    - content starting with "fail" raises an unexpected fault at execution
    - anything else evaluates to its own content
    """

    def __init__(self):
        self.contexts: list[FakeContext] = []
        self.executed: list[str] = []
        self.on_execute: Optional[Callable[[FakeCompiled], Any]] = None

    def new_context(self, access) -> FakeContext:
        context = FakeContext(access)
        self.contexts.append(context)
        return context

    async def compile(self, context: FakeContext, source) -> FakeCompiled:
        if source.content.startswith("compile-error"):
            raise ValueError("err:XPST0003 syntax error")
        return FakeCompiled(source, context)

    async def execute(self, compiled: FakeCompiled, context_sequence) -> FakeResult:
        if self.on_execute is not None:
            self.on_execute(compiled)
        self.executed.append(compiled.source.path)
        if compiled.source.content.startswith("fail"):
            raise RuntimeError("unexpected fault")
        return FakeResult(compiled.source.content)


@pytest.fixture
def fake_query_service() -> FakeQueryService:
    return FakeQueryService()


# =============================================================================
# MongoDB Fixtures (mongomock)
# =============================================================================

@pytest.fixture
def mock_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.

    This provides an in-memory MongoDB that behaves like the real thing
    for testing purposes. It is a plain fixture so the FastAPI TestClient,
    which runs its own event loop, can share it.
    """
    try:
        from mongomock_motor import AsyncMongoMockClient
    except ImportError:
        pytest.skip("mongomock-motor not installed")
    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest.fixture
def broker(mock_mongo_client, fake_query_service):
    """System broker on the mock database, without multi-document transactions."""
    from autostart.database.broker import DBBroker

    return DBBroker(
        mock_mongo_client,
        TEST_DB_NAME,
        query_service=fake_query_service,
        use_transactions=False,
    )


@pytest.fixture
def store_script(broker):
    """
    Store a resource, creating its collection when needed.

    Usage:
        async def test_something(store_script):
            await store_script("/db/system/autostart", "init.xq", "1 + 1")
    """
    async def _store(collection_path: str, name: str, content: str = "1 + 1"):
        txn_manager = broker.transaction_manager
        txn = await txn_manager.begin_transaction()
        try:
            await broker.get_or_create_collection(txn, collection_path)
            document = await broker.store_document(txn, collection_path, name, content)
            await txn_manager.commit(txn)
        finally:
            await txn_manager.close(txn)
        return document

    return _store


@pytest.fixture
def collection_doc(broker):
    """Fetch the raw stored record of a collection."""
    async def _get(path: str) -> Optional[dict]:
        return await broker.collections.find_one({"_id": path})

    return _get
