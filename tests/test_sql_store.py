"""SQLAlchemy document store specifics: predicate push-down and engine setup."""
from __future__ import annotations

from datetime import UTC, datetime

import pytest
from sqlalchemy import select

from taskboard.core.exceptions import ConfigurationError, StorageUnavailableError
from taskboard.query import AllOf, AnyOf, Contains, ElementEq, Eq, Lt, Ne
from taskboard.storage.sql import DocumentKeyModel, SQLAlchemyDocumentStore, compile_predicate


class TestCompilePredicate:

    def test_nothing_to_push(self) -> None:
        assert compile_predicate(None) is None
        assert compile_predicate(Lt("due_date", datetime(2024, 1, 1, tzinfo=UTC))) is None
        assert compile_predicate(ElementEq("team_members", "user", "Bob")) is None

    def test_eq_string_pushed(self) -> None:
        assert compile_predicate(Eq("status", "todo")) is not None

    def test_eq_number_not_pushed(self) -> None:
        assert compile_predicate(Eq("progress", 10)) is None

    def test_ne_pushed(self) -> None:
        assert compile_predicate(Ne("status", "completed")) is not None

    def test_non_ascii_search_not_pushed(self) -> None:
        assert compile_predicate(Contains("title", "Ünïcode")) is None

    def test_all_of_keeps_pushable_part(self) -> None:
        clause = compile_predicate(
            AllOf((Eq("status", "todo"), Lt("due_date", datetime(2024, 1, 1, tzinfo=UTC))))
        )
        assert clause is not None

    def test_any_of_needs_every_branch(self) -> None:
        assert compile_predicate(
            AnyOf((Eq("status", "todo"), ElementEq("team_members", "user", "Bob")))
        ) is None
        assert compile_predicate(
            AnyOf((Contains("title", "a"), Contains("description", "a")))
        ) is not None

    def test_empty_any_of_not_pushed(self) -> None:
        assert compile_predicate(AnyOf()) is None


class TestEngineSetup:

    def test_sync_driver_rejected(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            SQLAlchemyDocumentStore("sqlite:///./never-created.db")
        assert exc_info.value.parameter == "database_url"

    def test_unknown_driver_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            SQLAlchemyDocumentStore("nosuchdb+nodriver://localhost/db")

    def test_sqlite_pushdown_enabled(self) -> None:
        store = SQLAlchemyDocumentStore("sqlite+aiosqlite:///:memory:")
        assert store.pushdown is True


@pytest.mark.asyncio
class TestSQLiteBehaviour:

    async def test_initialize_idempotent(self, sqlite_store) -> None:
        await sqlite_store.initialize()
        assert await sqlite_store.count("tasks") == 0

    async def test_unique_key_rows_follow_email(self, sqlite_store) -> None:
        await sqlite_store.insert(
            "users", {"id": "u1", "name": "Alice", "email": "a@example.com"}
        )
        await sqlite_store.update_by_id("users", "u1", {"email": "b@example.com"})

        async with sqlite_store.session_factory() as session:
            result = await session.execute(select(DocumentKeyModel.value))
            assert result.scalars().all() == ["b@example.com"]

    async def test_delete_removes_key_rows(self, sqlite_store) -> None:
        await sqlite_store.insert(
            "users", {"id": "u1", "name": "Alice", "email": "a@example.com"}
        )
        await sqlite_store.delete_by_id("users", "u1")

        async with sqlite_store.session_factory() as session:
            result = await session.execute(select(DocumentKeyModel))
            assert result.scalars().all() == []

    async def test_python_filter_applies_without_pushdown(self, sqlite_store) -> None:
        sqlite_store.pushdown = False
        await sqlite_store.insert("tasks", {"id": "t1", "title": "a", "status": "todo"})
        await sqlite_store.insert("tasks", {"id": "t2", "title": "b", "status": "review"})
        found = await sqlite_store.find_many("tasks", Eq("status", "review"))
        assert [doc["id"] for doc in found] == ["t2"]

    async def test_non_pushed_predicate_still_filters(self, sqlite_store) -> None:
        await sqlite_store.insert(
            "projects", {"id": "p1", "name": "A", "team_members": [{"user": "Bob"}]}
        )
        await sqlite_store.insert("projects", {"id": "p2", "name": "B", "team_members": []})
        found = await sqlite_store.find_many("projects", ElementEq("team_members", "user", "Bob"))
        assert [doc["id"] for doc in found] == ["p1"]


@pytest.mark.asyncio
async def test_initialize_unreachable_database(tmp_path) -> None:
    url = f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'taskboard.db'}"
    store = SQLAlchemyDocumentStore(url)
    with pytest.raises(StorageUnavailableError) as exc_info:
        await store.initialize()
    assert exc_info.value.operation == "initialize"
    await store.close()
