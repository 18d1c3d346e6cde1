"""
Tests for the author operations.
"""

import uuid

import pytest

from authors import service


class TestAuthorCrud:
    @pytest.mark.asyncio
    async def test_create_and_get(self, author_store) -> None:
        created = await service.create_author(author_store, {"name": "Grace", "email": "grace@example.com"})
        assert created["status"] == 200
        assert created["result"]["name"] == "Grace"

        fetched = await service.get_author(author_store, created["result"]["_id"])
        assert fetched["status"] == 200
        assert fetched["result"]["email"] == "grace@example.com"

    @pytest.mark.asyncio
    async def test_name_is_required(self, author_store) -> None:
        outcome = await service.create_author(author_store, {"email": "nobody@example.com"})
        assert outcome["status"] == 400
        assert outcome["error"].fields == ["name"]
        assert author_store.calls == []

    @pytest.mark.asyncio
    async def test_list(self, author_store, author) -> None:
        outcome = await service.list_authors(author_store)
        assert outcome["status"] == 200
        assert [item["_id"] for item in outcome["result"]] == [str(author["_id"])]

    @pytest.mark.asyncio
    async def test_update(self, author_store, author) -> None:
        outcome = await service.update_author(author_store, str(author["_id"]), {"name": "Ada King"})
        assert outcome["status"] == 200
        assert outcome["result"]["name"] == "Ada King"
        assert outcome["result"]["email"] == author["email"]

    @pytest.mark.asyncio
    async def test_missing_author_is_404(self, author_store) -> None:
        missing_id = str(uuid.uuid4())
        outcome = await service.get_author(author_store, missing_id)
        assert outcome["status"] == 404
        assert outcome["error"].message == f"Author with id {missing_id} not found"

    @pytest.mark.asyncio
    async def test_delete(self, author_store, author) -> None:
        assert await service.delete_author(author_store, str(author["_id"])) == {"status": 200, "result": True}
        outcome = await service.delete_author(author_store, str(author["_id"]))
        assert outcome["status"] == 404

    @pytest.mark.asyncio
    async def test_malformed_id(self, author_store) -> None:
        outcome = await service.update_author(author_store, "123", {"name": "x"})
        assert outcome["status"] == 400
        assert author_store.calls == []
