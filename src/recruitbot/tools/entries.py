"""応募データ管理のMCPツール定義。"""

from typing import Any

from fastmcp import FastMCP

from recruitbot.models.errors import RecruitBotError
from recruitbot.services.entries import EntryService


def register_entry_tools(mcp: FastMCP, entry_service: EntryService) -> None:
    """応募データ管理用のMCPツールを登録する。"""

    @mcp.tool()
    async def list_applications(year: int | None = None, month: int | None = None) -> dict[str, Any]:
        """保存された応募データを新しい順に一覧する。

        year と month を両方指定すると、その月（日本時間）の応募だけを返します。

        Args:
            year: 対象の年（例: 2026）。
            month: 対象の月（1〜12）。
        """
        try:
            applications = await entry_service.list_applications(year, month)
            return {
                "count": len(applications),
                "applications": [a.model_dump(mode="json") for a in applications],
            }
        except RecruitBotError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def summarize_applications(year: int, month: int) -> dict[str, Any]:
        """指定月の応募件数を連絡手段別（LINE / メール / 電話）と日別に集計する。

        Args:
            year: 対象の年（例: 2026）。
            month: 対象の月（1〜12）。
        """
        try:
            summary = await entry_service.summarize(year, month)
            return summary.model_dump(mode="json")
        except RecruitBotError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def get_application(application_id: str) -> dict[str, Any]:
        """応募データを1件取得する。

        Args:
            application_id: 応募ID。
        """
        try:
            application = await entry_service.get_application(application_id)
            return application.model_dump(mode="json")
        except RecruitBotError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def delete_applications(application_ids: list[str]) -> dict[str, Any]:
        """応募データをまとめて削除する。

        Args:
            application_ids: 削除する応募IDのリスト。
        """
        try:
            deleted = await entry_service.delete_applications(application_ids)
            return {"deleted_count": deleted}
        except RecruitBotError as e:
            return {"error": type(e).__name__, "message": str(e)}
