"""訪問者ごとのチャットセッションを管理するサービス。"""

import logging
import random
import uuid
from collections.abc import Callable
from dataclasses import dataclass

from recruitbot.models.application import CONTACT_METHODS, DEFAULT_CONTACT_METHOD, Application, ApplicationDraft
from recruitbot.models.conversation import ChatState, ChatTiming
from recruitbot.models.errors import ContactMethodError, SessionNotFoundError, StorageError
from recruitbot.services.catalog import CatalogService
from recruitbot.services.engine import ConversationEngine
from recruitbot.storage.base import ApplicationStore

_LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class _SessionContext:
    """セッションごとの会話エンジンと応募者情報。"""

    engine: ConversationEngine
    contact_method: str
    name: str | None


class ChatService:
    """セッション単位で会話エンジンを保持し、確定した応募を保存先へ渡す。"""

    def __init__(
        self,
        catalog_service: CatalogService,
        store: ApplicationStore,
        *,
        timing: ChatTiming | None = None,
        max_sessions: int = 200,
        rng_factory: Callable[[], random.Random] = random.Random,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions は 1 以上である必要があります。")
        self._catalog_service = catalog_service
        self._store = store
        self._timing = timing or ChatTiming()
        self._max_sessions = max_sessions
        self._rng_factory = rng_factory
        self._sessions: dict[str, _SessionContext] = {}

    def create_session(self, contact_method: str = DEFAULT_CONTACT_METHOD, name: str | None = None) -> str:
        """新しいチャットセッションを作成して session_id を返す。

        Args:
            contact_method: 応募後の連絡手段。CONTACT_METHODS のいずれか。
            name: 応募者名。チャットでは未入力のことが多い。

        Raises:
            ContactMethodError: 未対応の連絡手段が指定された場合。
            CatalogError: 台本の読み込みに失敗した場合。
        """
        if contact_method not in CONTACT_METHODS:
            raise ContactMethodError(contact_method)
        catalog = self._catalog_service.load()
        if len(self._sessions) >= self._max_sessions:
            self._evict_oldest_session()

        session_id = str(uuid.uuid4())
        engine = ConversationEngine(catalog, timing=self._timing, rng=self._rng_factory())
        self._sessions[session_id] = _SessionContext(engine=engine, contact_method=contact_method, name=name)
        _LOG.info("Created chat session %s", session_id)
        return session_id

    def get_engine(self, session_id: str) -> ConversationEngine:
        """セッションの会話エンジンを返す。

        Raises:
            SessionNotFoundError: セッションが存在しない場合。
        """
        return self._get(session_id).engine

    def get_state(self, session_id: str) -> ChatState:
        return self._get(session_id).engine.snapshot()

    async def select_choice(self, session_id: str, label: str, *, wait: bool = False) -> ChatState:
        """選択肢を選ぶ。wait=True の場合は予約された遷移の完了を待つ。"""
        context = self._get(session_id)
        context.engine.select_choice(label)
        return await self._settle(context, wait)

    async def submit_numeric_answer(self, session_id: str, raw_text: str, *, wait: bool = False) -> ChatState:
        """週に入れる日数を送信する。"""
        context = self._get(session_id)
        context.engine.submit_numeric_answer(raw_text)
        return await self._settle(context, wait)

    async def confirm_entry(self, session_id: str) -> Application | None:
        """プレビュー中の応募文を確定して保存する。

        Returns:
            保存した応募データ。プレビュー中でなければ None。

        Raises:
            StorageError: 保存に失敗した場合。応募内容は未送信のまま残り、
                resubmit_pending で再送できる。
        """
        context = self._get(session_id)
        if context.engine.confirm_entry() is None:
            return None
        saved = await self._flush(context)
        return saved[-1]

    async def resubmit_pending(self, session_id: str) -> list[Application]:
        """保存に失敗して残っている応募を再送する。"""
        return await self._flush(self._get(session_id))

    def open_session(self, session_id: str) -> ChatState:
        engine = self._get(session_id).engine
        engine.open()
        return engine.snapshot()

    def close_session(self, session_id: str) -> ChatState:
        engine = self._get(session_id).engine
        engine.close()
        return engine.snapshot()

    def delete_session(self, session_id: str) -> None:
        """セッションを破棄する。予約中の遷移も取り消す。"""
        context = self._sessions.pop(session_id, None)
        if context is None:
            return
        context.engine.close()
        if context.engine.pending_confirmed:
            _LOG.warning(
                "Discarded %d unsaved application(s) with session %s", context.engine.pending_confirmed, session_id
            )

    def list_sessions(self) -> list[str]:
        return list(self._sessions)

    def _get(self, session_id: str) -> _SessionContext:
        context = self._sessions.get(session_id)
        if context is None:
            raise SessionNotFoundError(session_id)
        return context

    async def _settle(self, context: _SessionContext, wait: bool) -> ChatState:
        if wait:
            await context.engine.wait_idle()
        await self._flush(context)
        return context.engine.snapshot()

    async def _flush(self, context: _SessionContext) -> list[Application]:
        """エンジンで確定した応募を保存先へ渡す。

        保存に失敗した応募とそれ以降の応募はエンジンへ戻してから送出する。
        """
        drafts = context.engine.take_confirmed()
        saved: list[Application] = []
        for index, draft in enumerate(drafts):
            application = self._to_application(context, draft)
            try:
                await self._store.save(application)
            except Exception as e:
                context.engine.requeue_confirmed(drafts[index:])
                _LOG.warning("Failed to save application; %d left pending", len(drafts) - index)
                if isinstance(e, StorageError):
                    raise
                raise StorageError(f"Failed to save application: {e}") from e
            _LOG.info("Saved application %s", application.id)
            saved.append(application)
        return saved

    @staticmethod
    def _to_application(context: _SessionContext, draft: ApplicationDraft) -> Application:
        return Application(
            id=str(uuid.uuid4()),
            contact_method=context.contact_method,
            name=context.name,
            age=draft.age,
            work_style=draft.work_style,
            reason=draft.reason,
            application_text=draft.application_text,
        )

    def _evict_oldest_session(self) -> None:
        oldest_session_id = next(iter(self._sessions))
        self.delete_session(oldest_session_id)
        _LOG.info("Evicted chat session %s", oldest_session_id)
