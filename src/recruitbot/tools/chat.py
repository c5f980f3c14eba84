"""チャット層のMCPツール定義。"""

from typing import Any

from fastmcp import FastMCP

from recruitbot.models.application import DEFAULT_CONTACT_METHOD
from recruitbot.models.conversation import ChatState
from recruitbot.models.errors import RecruitBotError
from recruitbot.services.chat import ChatService


def _state_to_dict(session_id: str, state: ChatState) -> dict[str, Any]:
    return {"session_id": session_id, **state.model_dump(mode="json")}


def register_chat_tools(mcp: FastMCP, chat_service: ChatService) -> None:
    """チャット関連のMCPツールを登録する。"""

    @mcp.tool()
    async def create_chat_session(contact_method: str = DEFAULT_CONTACT_METHOD, name: str | None = None) -> dict[str, Any]:
        """新しいチャットセッションを作成する。

        返却される session_id を以降のツール呼び出しで使用します。
        会話履歴には注意書きと最初のあいさつが入った状態で始まります。

        Args:
            contact_method: 応募後の連絡手段（LINE / メール / 電話）。
            name: 応募者の名前（任意）。
        """
        try:
            session_id = chat_service.create_session(contact_method=contact_method, name=name)
            return _state_to_dict(session_id, chat_service.get_state(session_id))
        except RecruitBotError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def get_chat_state(session_id: str) -> dict[str, Any]:
        """チャットの現在状態（履歴・選択肢・プレビューなど）を取得する。

        Args:
            session_id: セッションID。
        """
        try:
            return _state_to_dict(session_id, chat_service.get_state(session_id))
        except RecruitBotError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def select_choice(session_id: str, label: str, wait: bool = False) -> dict[str, Any]:
        """提示中の選択肢を選ぶ。

        返答の「考え中」演出が終わるまで待つ場合は wait を true にしてください。

        Args:
            session_id: セッションID。
            label: 選択肢のラベル。
            wait: 予約された遷移の完了を待つかどうか。
        """
        try:
            return _state_to_dict(session_id, await chat_service.select_choice(session_id, label, wait=wait))
        except RecruitBotError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def submit_numeric_answer(session_id: str, text: str, wait: bool = False) -> dict[str, Any]:
        """週に入れる日数（1〜6）を送信する。

        範囲外や数字以外の場合は numeric_error にメッセージが入り、状態は変わりません。

        Args:
            session_id: セッションID。
            text: 入力された文字列。
            wait: 予約された遷移の完了を待つかどうか。
        """
        try:
            state = await chat_service.submit_numeric_answer(session_id, text, wait=wait)
            return _state_to_dict(session_id, state)
        except RecruitBotError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def confirm_entry(session_id: str) -> dict[str, Any]:
        """応募文プレビューの内容で応募を確定する。

        Args:
            session_id: セッションID。
        """
        try:
            application = await chat_service.confirm_entry(session_id)
            result = _state_to_dict(session_id, chat_service.get_state(session_id))
            result["application"] = application.model_dump(mode="json") if application else None
            return result
        except RecruitBotError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def open_chat(session_id: str) -> dict[str, Any]:
        """チャットを開く。閉じていた場合は新しい会話として始まります。

        Args:
            session_id: セッションID。
        """
        try:
            return _state_to_dict(session_id, chat_service.open_session(session_id))
        except RecruitBotError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def close_chat(session_id: str) -> dict[str, Any]:
        """チャットを閉じ、予約中の返答を取り消す。

        Args:
            session_id: セッションID。
        """
        try:
            return _state_to_dict(session_id, chat_service.close_session(session_id))
        except RecruitBotError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def resubmit_pending_applications(session_id: str) -> dict[str, Any]:
        """保存に失敗して未送信のまま残っている応募を再送する。

        Args:
            session_id: セッションID。
        """
        try:
            applications = await chat_service.resubmit_pending(session_id)
            return {
                "session_id": session_id,
                "saved_count": len(applications),
                "applications": [a.model_dump(mode="json") for a in applications],
            }
        except RecruitBotError as e:
            return {"error": type(e).__name__, "message": str(e)}
