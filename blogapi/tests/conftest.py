import copy
from datetime import datetime
import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import AsyncClient, ASGITransport
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from blogapi.main import app
from blogapi.core import get_store


class MemoryStore:
    """In-process stand-in for MongoStore, matching filters by equality"""

    def __init__(self):
        self.collections = {}

    def _docs(self, collection):
        return self.collections.setdefault(collection, [])

    @staticmethod
    def _encode(document):
        # BSON keeps datetimes to the millisecond
        doc = copy.deepcopy(document)
        for key, value in doc.items():
            if isinstance(value, datetime):
                doc[key] = value.replace(microsecond=value.microsecond // 1000 * 1000)
        return doc

    @staticmethod
    def _matches(doc, filter):
        return all(doc.get(k) == v for k, v in (filter or {}).items())

    async def ping(self):
        return None

    async def ensure_indexes(self):
        return None

    async def find(self, collection, filter=None, sort=None):
        docs = [copy.deepcopy(d) for d in self._docs(collection) if self._matches(d, filter)]
        for key, direction in reversed(list(sort or [])):
            docs.sort(key=lambda d: d[key], reverse=direction < 0)
        return docs

    async def find_one(self, collection, filter):
        for doc in self._docs(collection):
            if self._matches(doc, filter):
                return copy.deepcopy(doc)
        return None

    async def insert_one(self, collection, document):
        # like MongoStore, hand back the caller's document rather than the stored one
        doc = copy.deepcopy(document)
        doc.setdefault('_id', ObjectId())
        self._docs(collection).append(self._encode(doc))
        return doc

    async def update_one(self, collection, filter, changes):
        for doc in self._docs(collection):
            if self._matches(doc, filter):
                doc.update(self._encode(changes))
                return copy.deepcopy(doc)
        return None

    async def delete_one(self, collection, filter):
        docs = self._docs(collection)
        for i, doc in enumerate(docs):
            if self._matches(doc, filter):
                del docs[i]
                return True
        return False


class RacingSignupStore(MemoryStore):
    """Another request inserts the same email between the lookup and the insert"""

    async def insert_one(self, collection, document):
        if collection == 'users':
            raise DuplicateKeyError('E11000 duplicate key error collection: blog.users index: email_1')
        return await super().insert_one(collection, document)


class FailingStore:
    """Every operation fails the way an unreachable MongoDB does"""

    def __getattr__(self, name):
        async def fail(*args, **kwargs):
            raise ServerSelectionTimeoutError('mongo:27017: connection refused')
        return fail


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest_asyncio.fixture
async def client(store):
    app.dependency_overrides[get_store] = lambda: store
    async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def broken_client(failing_store):
    app.dependency_overrides[get_store] = lambda: failing_store
    async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def racing_client():
    app.dependency_overrides[get_store] = lambda: RacingSignupStore()
    async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as ac:
        yield ac
    app.dependency_overrides.clear()
