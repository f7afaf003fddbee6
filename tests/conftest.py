"""Test configuration and fixtures."""
import os
import pytest
from pymongo.errors import PyMongoError, ServerSelectionTimeoutError
from mongo_mcp.services.mongodb.client import MongoContext

TEST_DATABASE_URL = "mongodb://localhost:27017/test_db"
LIVE_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "mongodb://localhost:27017/test_mongo_mcp")


def _matches(doc, filter_query):
    return all(doc.get(key) == value for key, value in filter_query.items())


class FakeCursor:
    """Stands in for a motor cursor; errors surface on iteration like the driver's."""

    def __init__(self, docs, error=None):
        self._docs = list(docs)
        self._error = error

    async def to_list(self, length=None):
        if self._error is not None:
            raise self._error
        return [dict(doc) for doc in self._docs]


class FakeCollection:
    """In-memory collection that records every driver call."""

    def __init__(self, name, docs=None, aggregate_result=None, aggregate_error=None):
        self.name = name
        self.docs = list(docs or [])
        self.aggregate_result = aggregate_result
        self.aggregate_error = aggregate_error
        self.calls = []

    def find(self, filter_query=None, **options):
        self.calls.append(("find", filter_query, options))
        matches = [doc for doc in self.docs if _matches(doc, filter_query or {})]
        if options.get("limit"):
            matches = matches[: options["limit"]]
        return FakeCursor(matches)

    async def find_one(self, filter_query=None, **options):
        self.calls.append(("find_one", filter_query, options))
        for doc in self.docs:
            if _matches(doc, filter_query or {}):
                return dict(doc)
        return None

    def aggregate(self, pipeline):
        self.calls.append(("aggregate", pipeline, {}))
        return FakeCursor(self.aggregate_result or [], error=self.aggregate_error)


class FakeDatabase:
    """Collections exist once added; indexing an unknown name behaves like Mongo and returns an empty one."""

    def __init__(self, name="test_db"):
        self.name = name
        self.collections = {}
        self.existing = set()
        self.list_calls = 0

    def add_collection(self, name, docs=None, **kwargs):
        collection = FakeCollection(name, docs, **kwargs)
        self.collections[name] = collection
        self.existing.add(name)
        return collection

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]

    async def list_collection_names(self, filter=None):
        self.list_calls += 1
        names = sorted(self.existing)
        if filter and "name" in filter:
            names = [name for name in names if name == filter["name"]]
        return names

    def total_calls(self):
        return sum(len(collection.calls) for collection in self.collections.values())


class FakeAdmin:
    def __init__(self, fail=False):
        self.fail = fail

    async def command(self, name):
        if self.fail:
            raise ServerSelectionTimeoutError("localhost:27017: connection refused")
        return {"ok": 1.0}


class FakeMotorClient:
    def __init__(self, db, fail_ping=False, close_error=None):
        self.db = db
        self.admin = FakeAdmin(fail=fail_ping)
        self.close_error = close_error
        self.close_calls = 0
        self.init_kwargs = {}

    def __getitem__(self, name):
        return self.db

    def close(self):
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


@pytest.fixture
def fake_db():
    """An empty in-memory database."""
    return FakeDatabase()


@pytest.fixture
def fake_client(fake_db):
    return FakeMotorClient(fake_db)


@pytest.fixture
def failing_client(fake_db):
    """A client whose ping fails as if no server answered."""
    return FakeMotorClient(fake_db, fail_ping=True)


@pytest.fixture
def make_context(fake_client):
    """Build an unconnected context whose client factory returns the fake client."""
    def factory(connection_string=TEST_DATABASE_URL):
        def client_factory(uri, **kwargs):
            fake_client.init_kwargs = kwargs
            return fake_client
        return MongoContext(connection_string, client_factory=client_factory)
    return factory


@pytest.fixture
async def mongo_context(make_context):
    """A connected context over the fake database."""
    ctx = make_context()
    await ctx.connect()
    yield ctx
    ctx.close()


@pytest.fixture
async def live_context():
    """A context connected to a real MongoDB; skipped when none is reachable."""
    ctx = MongoContext(LIVE_DATABASE_URL, server_selection_timeout_ms=1000)
    try:
        await ctx.connect()
    except PyMongoError:
        pytest.skip(f"MongoDB not reachable at {LIVE_DATABASE_URL}")

    # Clean database before tests
    for name in await ctx.db.list_collection_names():
        await ctx.db[name].drop()

    yield ctx

    # Clean up after tests
    for name in await ctx.db.list_collection_names():
        await ctx.db[name].drop()
    ctx.close()
