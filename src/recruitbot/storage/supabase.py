"""Supabaseベースの応募データストア。"""

from datetime import datetime
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from recruitbot.models.application import DEFAULT_CONTACT_METHOD, Application
from recruitbot.models.errors import ApplicationNotFoundError, StorageError
from recruitbot.storage.base import ApplicationStore

APPLICATIONS_TABLE = "chat_applications"


class SupabaseClientManager:
    """Supabaseクライアントを遅延生成して使い回す。"""

    def __init__(self, url: str, key: str) -> None:
        self.url = url
        self.key = key
        self._client: Client | None = None

    def get_client(self) -> Client:
        if self._client is None:
            self._client = create_client(self.url, self.key)
        return self._client


class SupabaseApplicationStore(ApplicationStore):
    """chat_applications テーブルに応募データを保存する。

    PostgREST・通信のエラーは StorageError に変換して送出する。
    """

    def __init__(self, client_manager: SupabaseClientManager) -> None:
        self.client_manager = client_manager

    def _to_model(self, row: dict[str, Any]) -> Application:
        """Supabaseの行をApplicationに変換する。"""
        created_at = row["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
        return Application(
            id=row["id"],
            contact_method=row.get("contact_method") or DEFAULT_CONTACT_METHOD,
            name=row.get("name"),
            age=row.get("age"),
            work_style=row.get("work_style"),
            reason=row.get("reason"),
            application_text=row.get("application_text"),
            interview_time=row.get("interview_time"),
            created_at=created_at,
        )

    def _execute(self, action: str, query: Any) -> Any:
        try:
            return query.execute()
        except (APIError, httpx.HTTPError) as e:
            raise StorageError(f"Supabase {action} failed: {e.__class__.__name__}: {e}") from e

    async def save(self, application: Application) -> None:
        client = self.client_manager.get_client()
        query = client.table(APPLICATIONS_TABLE).insert(application.model_dump(mode="json"))
        self._execute("insert", query)

    async def get(self, application_id: str) -> Application:
        client = self.client_manager.get_client()
        query = client.table(APPLICATIONS_TABLE).select("*").eq("id", application_id).limit(1)
        response = self._execute("select", query)
        if not response.data:
            raise ApplicationNotFoundError(application_id)
        return self._to_model(response.data[0])

    async def list_all(self) -> list[Application]:
        client = self.client_manager.get_client()
        query = client.table(APPLICATIONS_TABLE).select("*").order("created_at", desc=True)
        response = self._execute("select", query)
        return [self._to_model(row) for row in response.data]

    async def delete(self, application_ids: list[str]) -> int:
        if not application_ids:
            return 0
        client = self.client_manager.get_client()
        query = client.table(APPLICATIONS_TABLE).delete().in_("id", application_ids)
        response = self._execute("delete", query)
        return len(response.data or [])
