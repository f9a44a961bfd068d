"""
pytest configuration and fixtures.
"""

from typing import Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from userdb.database import to_object_id
from userdb.main import create_app


class InMemoryUserStore:
    """UserStore double keeping documents in a dict, with a unique email index."""

    def __init__(self):
        self.documents: Dict[ObjectId, Dict] = {}
        self.closed = False

    def _check_email(self, email: str, exclude: ObjectId = None):
        for object_id, document in self.documents.items():
            if object_id != exclude and document["email"] == email:
                raise DuplicateKeyError(
                    f'E11000 duplicate key error collection: userdb.users index: email_1 dup key: {{ email: "{email}" }}',
                    code=11000,
                )

    async def find_all(self) -> List[Dict]:
        return [dict(document) for document in self.documents.values()]

    async def insert(self, user: Dict) -> Dict:
        self._check_email(user["email"])
        document = dict(user, _id=ObjectId())
        self.documents[document["_id"]] = document
        return dict(document)

    async def find_by_id_and_replace(self, user_id: str, user: Dict) -> Optional[Dict]:
        object_id = to_object_id(user_id)
        if object_id not in self.documents:
            return None
        self._check_email(user["email"], exclude=object_id)
        document = dict(user, _id=object_id)
        self.documents[object_id] = document
        return dict(document)

    async def find_by_id_and_delete(self, user_id: str) -> Optional[Dict]:
        return self.documents.pop(to_object_id(user_id), None)

    async def exists(self, user_id: str) -> bool:
        return to_object_id(user_id) in self.documents

    def close(self):
        self.closed = True


class UnreachableUserStore:
    """UserStore double whose every call fails like an unreachable server."""

    error = "localhost:27017: [Errno 111] Connection refused"

    async def _fail(self, *args):
        raise ServerSelectionTimeoutError(self.error)

    find_all = insert = find_by_id_and_replace = find_by_id_and_delete = exists = _fail

    def close(self):
        pass


@pytest.fixture
def valid_user() -> dict:
    """A request body passing every validation rule."""
    return {
        "username": "ada",
        "email": "ada@example.com",
        "phone": "+14155552671",
        "dateOfBirth": "1815-12-10",
    }


@pytest.fixture
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def client(store) -> TestClient:
    """Test client for an app serving the in-memory store."""
    with TestClient(create_app(user_store=store)) as test_client:
        yield test_client


@pytest.fixture
def failing_client() -> TestClient:
    """Test client for an app whose store cannot reach the database."""
    with TestClient(create_app(user_store=UnreachableUserStore())) as test_client:
        yield test_client


@pytest.fixture
def store_factory():
    """Build fresh in-memory stores, for tests that need more than one."""
    return InMemoryUserStore
