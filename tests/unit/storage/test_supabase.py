"""SupabaseApplicationStoreのユニットテスト。"""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import httpx
import pytest
from postgrest.exceptions import APIError

from recruitbot.models.application import Application
from recruitbot.models.errors import ApplicationNotFoundError, StorageError
from recruitbot.storage.supabase import SupabaseApplicationStore, SupabaseClientManager


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def supabase_store(client: MagicMock) -> SupabaseApplicationStore:
    manager = SupabaseClientManager("https://example.supabase.co", "test-key")
    manager._client = client
    return SupabaseApplicationStore(manager)


def _row(**overrides: object) -> dict:
    row = {
        "id": "app-1",
        "contact_method": "LINE",
        "name": None,
        "age": "20〜22歳",
        "work_style": "本業と両立したい",
        "reason": "生活に余裕がほしい",
        "application_text": "text",
        "interview_time": None,
        "created_at": "2026-10-19T09:00:00Z",
    }
    row.update(overrides)
    return row


class TestSupabaseApplicationStore:
    async def test_save_inserts_into_chat_applications(
        self, supabase_store: SupabaseApplicationStore, client: MagicMock
    ) -> None:
        application = Application(id="app-1", age="20〜22歳", created_at=datetime(2026, 10, 19, tzinfo=UTC))
        await supabase_store.save(application)

        client.table.assert_called_with("chat_applications")
        inserted = client.table.return_value.insert.call_args.args[0]
        assert inserted["id"] == "app-1"
        assert inserted["age"] == "20〜22歳"
        assert inserted["created_at"].startswith("2026-10-19")

    async def test_get_converts_row(self, supabase_store: SupabaseApplicationStore, client: MagicMock) -> None:
        query = client.table.return_value.select.return_value.eq.return_value.limit.return_value
        query.execute.return_value = MagicMock(data=[_row()])

        application = await supabase_store.get("app-1")
        assert application.work_style == "本業と両立したい"
        assert application.created_at == datetime(2026, 10, 19, 9, 0, tzinfo=UTC)

    async def test_get_missing_raises_error(self, supabase_store: SupabaseApplicationStore, client: MagicMock) -> None:
        query = client.table.return_value.select.return_value.eq.return_value.limit.return_value
        query.execute.return_value = MagicMock(data=[])

        with pytest.raises(ApplicationNotFoundError):
            await supabase_store.get("missing")

    async def test_delete_empty_list_skips_request(
        self, supabase_store: SupabaseApplicationStore, client: MagicMock
    ) -> None:
        assert await supabase_store.delete([]) == 0
        client.table.assert_not_called()

    async def test_delete_returns_deleted_count(
        self, supabase_store: SupabaseApplicationStore, client: MagicMock
    ) -> None:
        query = client.table.return_value.delete.return_value.in_.return_value
        query.execute.return_value = MagicMock(data=[_row(id="a"), _row(id="b")])

        assert await supabase_store.delete(["a", "b"]) == 2

    async def test_missing_contact_method_defaults_to_line(
        self, supabase_store: SupabaseApplicationStore, client: MagicMock
    ) -> None:
        query = client.table.return_value.select.return_value.eq.return_value.limit.return_value
        query.execute.return_value = MagicMock(data=[_row(contact_method=None)])

        application = await supabase_store.get("app-1")
        assert application.contact_method == "LINE"

    async def test_insert_api_error_raises_storage_error(
        self, supabase_store: SupabaseApplicationStore, client: MagicMock
    ) -> None:
        query = client.table.return_value.insert.return_value
        query.execute.side_effect = APIError({"message": "permission denied", "code": "42501"})

        with pytest.raises(StorageError, match="insert"):
            await supabase_store.save(Application(id="app-1"))

    async def test_connection_error_raises_storage_error(
        self, supabase_store: SupabaseApplicationStore, client: MagicMock
    ) -> None:
        query = client.table.return_value.select.return_value.order.return_value
        query.execute.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(StorageError) as exc_info:
            await supabase_store.list_all()
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
