"""
Shared fixtures.

The store is replaced by an in-memory fake with the same methods as
`PostRepository` / `AuthorRepository`, so no database is needed.
"""

import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import copy
import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from authors import router as authors_router
from core.errors import PersistenceError
from main import app
from posts import router as posts_router


def _now() -> datetime:
    return datetime.now(timezone.utc)


class FakeDatabase:
    def __init__(self) -> None:
        self.authors: dict[uuid.UUID, dict] = {}
        self.posts: dict[uuid.UUID, dict] = {}

    def add_author(self, name: str = "Ada Lovelace", email: str | None = "ada@example.com") -> dict:
        now = _now()
        author = {
            "_id": uuid.uuid4(),
            "name": name,
            "email": email,
            "created_at": now,
            "updated_at": now,
        }
        self.authors[author["_id"]] = author
        return copy.deepcopy(author)


class FakePostStore:
    def __init__(self, database: FakeDatabase) -> None:
        self.database = database
        self.calls: list[str] = []

    def _record(self, post: dict, populate_author: bool) -> dict:
        record = copy.deepcopy(post)
        if populate_author:
            author = self.database.authors.get(post["author"])
            record["author"] = copy.deepcopy(author) if author else None
        return record

    async def create(self, draft: dict) -> dict:
        self.calls.append("create")
        if draft.get("author") not in self.database.authors:
            raise PersistenceError("insert or update on table \"posts\" violates foreign key constraint")
        now = _now()
        post = {
            "_id": uuid.uuid4(),
            "title": draft["title"],
            "content": draft["content"],
            "author": draft["author"],
            "created_at": now,
            "updated_at": now,
        }
        self.database.posts[post["_id"]] = post
        return self._record(post, populate_author=False)

    async def find(self, *, populate_author: bool = False) -> list[dict]:
        self.calls.append("find")
        return [self._record(post, populate_author) for post in self.database.posts.values()]

    async def find_by_id(self, post_id: uuid.UUID, *, populate_author: bool = False) -> dict | None:
        self.calls.append("find_by_id")
        post = self.database.posts.get(post_id)
        return self._record(post, populate_author) if post else None

    async def find_by_id_and_update(
        self,
        post_id: uuid.UUID,
        changes: dict,
        *,
        populate_author: bool = False,
    ) -> dict | None:
        self.calls.append("find_by_id_and_update")
        post = self.database.posts.get(post_id)
        if post is None:
            return None
        for field in ("title", "content", "author"):
            if changes.get(field) is not None:
                post[field] = changes[field]
        post["updated_at"] = _now()
        return self._record(post, populate_author)

    async def find_by_id_and_delete(self, post_id: uuid.UUID) -> dict | None:
        self.calls.append("find_by_id_and_delete")
        post = self.database.posts.pop(post_id, None)
        return self._record(post, populate_author=False) if post else None


class FakeAuthorStore:
    def __init__(self, database: FakeDatabase) -> None:
        self.database = database
        self.calls: list[str] = []

    async def create(self, draft: dict) -> dict:
        self.calls.append("create")
        return self.database.add_author(name=draft["name"], email=draft.get("email"))

    async def find(self) -> list[dict]:
        self.calls.append("find")
        return [copy.deepcopy(author) for author in self.database.authors.values()]

    async def find_by_id(self, author_id: uuid.UUID) -> dict | None:
        self.calls.append("find_by_id")
        author = self.database.authors.get(author_id)
        return copy.deepcopy(author) if author else None

    async def find_by_id_and_update(self, author_id: uuid.UUID, changes: dict) -> dict | None:
        self.calls.append("find_by_id_and_update")
        author = self.database.authors.get(author_id)
        if author is None:
            return None
        for field in ("name", "email"):
            if changes.get(field) is not None:
                author[field] = changes[field]
        author["updated_at"] = _now()
        return copy.deepcopy(author)

    async def find_by_id_and_delete(self, author_id: uuid.UUID) -> dict | None:
        self.calls.append("find_by_id_and_delete")
        author = self.database.authors.pop(author_id, None)
        if author is None:
            return None
        for post in self.database.posts.values():
            if post["author"] == author_id:
                post["author"] = None
        return author


class BrokenStore:
    """
    Every call fails the way a dropped connection would.
    """

    def __init__(self, error: BaseException) -> None:
        self.error = error

    def __getattr__(self, name: str):
        async def _fail(*args, **kwargs):
            raise self.error

        return _fail


@pytest.fixture
def database() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def author(database: FakeDatabase) -> dict:
    return database.add_author()


@pytest.fixture
def post_store(database: FakeDatabase) -> FakePostStore:
    return FakePostStore(database)


@pytest.fixture
def author_store(database: FakeDatabase) -> FakeAuthorStore:
    return FakeAuthorStore(database)


@pytest.fixture
def client(post_store: FakePostStore, author_store: FakeAuthorStore):
    app.dependency_overrides[posts_router.get_repository] = lambda: post_store
    app.dependency_overrides[authors_router.get_repository] = lambda: author_store
    try:
        # No context manager: the lifespan (DB pool) is not started.
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def broken_store():
    return BrokenStore
