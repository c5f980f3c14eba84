"""選択式チャットボットの会話エンジン。

トップメニュー・週日数入力・応募文ヒアリングの3系統の遷移を1つの
状態機械で扱う。「考え中」の待ち時間は asyncio のタスクとして予約し、
close() で取り消せる。予約中（busy）に届いた入力は無視する。
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Coroutine
from typing import Any

from recruitbot.models.application import ApplicationDraft
from recruitbot.models.catalog import WEEK_COUNT_MAX, ChatCatalog, ChoiceKind, QuestionNode
from recruitbot.models.conversation import ChatState, ChatTiming, ConversationPhase, Message, Role

_LOG = logging.getLogger(__name__)


class _BlankDefault(dict[str, str]):
    """未回答のキーを空文字で埋める。"""

    def __missing__(self, key: str) -> str:
        return ""


def render_entry_text(template: str, answers: dict[str, str]) -> str:
    """ヒアリング回答を応募文テンプレートに差し込む。"""
    return template.format_map(_BlankDefault(answers))


class ConversationEngine:
    """1人の訪問者との会話状態を保持する。

    Args:
        catalog: 読み取り専用の台本。
        timing: 演出用の待ち時間。
        rng: 定型返答の選択に使う乱数源。
    """

    def __init__(
        self,
        catalog: ChatCatalog,
        *,
        timing: ChatTiming | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._catalog = catalog
        self._timing = timing or ChatTiming()
        self._rng = rng or random.Random()
        self._pending: asyncio.Task[None] | None = None
        self._confirmed: list[ApplicationDraft] = []
        self._reset()

    def _reset(self) -> None:
        self._is_open = True
        self._phase = ConversationPhase.ROOT
        self._hearing_step = 0
        self._hearing_answers: dict[str, str] = {}
        self._numeric_error = ""
        self._entry_preview: str | None = None
        self._history: list[Message] = [
            Message(role="notice", text=self._catalog.notice),
            Message(role="bot", text=self._catalog.greeting),
        ]

    @property
    def phase(self) -> ConversationPhase:
        return self._phase

    @property
    def hearing_step(self) -> int:
        return self._hearing_step

    @property
    def hearing_answers(self) -> dict[str, str]:
        return dict(self._hearing_answers)

    @property
    def history(self) -> list[Message]:
        return list(self._history)

    @property
    def numeric_error(self) -> str:
        return self._numeric_error

    @property
    def entry_preview(self) -> str | None:
        return self._entry_preview

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def busy(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def current_node(self) -> QuestionNode | None:
        """現在提示しているノード。入力待ちでない場合は None。"""
        if not self._is_open or self.busy:
            return None
        if self._phase == ConversationPhase.ROOT:
            return self._catalog.root_node()
        if self._phase == ConversationPhase.HEARING:
            return self._catalog.hearing_node(self._hearing_step)
        if self._phase == ConversationPhase.ENTRY_PREVIEW:
            return self._catalog.preview_node()
        return None

    def offered_choices(self) -> list[str]:
        """現在押せる選択肢のラベル。"""
        node = self.current_node()
        return [choice.label for choice in node.choices] if node else []

    def snapshot(self) -> ChatState:
        """表示層向けの状態スナップショットを返す。"""
        node = self.current_node()
        prompt = node.prompt_text if node else None
        if self._phase == ConversationPhase.AWAITING_NUMERIC_INPUT:
            prompt = self._catalog.numeric_prompt
        return ChatState(
            is_open=self._is_open,
            phase=self._phase,
            busy=self.busy,
            hearing_step=self._hearing_step,
            prompt=prompt,
            choices=[choice.label for choice in node.choices] if node else [],
            history=list(self._history),
            hearing_answers=dict(self._hearing_answers),
            awaiting_numeric_input=self._phase == ConversationPhase.AWAITING_NUMERIC_INPUT,
            numeric_error=self._numeric_error,
            entry_preview=self._entry_preview,
        )

    def take_confirmed(self) -> list[ApplicationDraft]:
        """確定済みで未引き渡しの応募内容を取り出す。"""
        drafts, self._confirmed = self._confirmed, []
        return drafts

    def requeue_confirmed(self, drafts: list[ApplicationDraft]) -> None:
        """引き渡しに失敗した応募内容を順序を保ったまま先頭へ戻す。"""
        self._confirmed[:0] = drafts

    @property
    def pending_confirmed(self) -> int:
        return len(self._confirmed)

    def select_choice(self, label: str) -> bool:
        """選択肢を選ぶ。

        Returns:
            入力を受け付けた場合は True。予約中・クローズ中、またはイベントループの
            外で遷移を予約できない場合は無視して False。
        """
        if not self._accepting_input():
            return False

        if self._phase == ConversationPhase.HEARING:
            return self._answer_hearing(label)
        if self._phase == ConversationPhase.ENTRY_PREVIEW:
            if label != self._catalog.confirm_label:
                _LOG.debug("Ignored choice %r during entry preview", label)
                return False
            self.confirm_entry()
            return True
        if self._phase != ConversationPhase.ROOT:
            _LOG.debug("Ignored choice %r in phase %s", label, self._phase)
            return False

        topic = self._catalog.find_topic(label)
        kind = topic.kind if topic else ChoiceKind.CANNED_ANSWER

        if kind == ChoiceKind.NUMERIC_INPUT:
            self._append("user", label)
            self._phase = ConversationPhase.AWAITING_NUMERIC_INPUT
            return True

        loop = _running_loop()
        if loop is None:
            return False

        self._append("user", label)
        if kind == ChoiceKind.ADVANCE_HEARING:
            self._schedule(loop, self._start_hearing())
            return True

        response_set = self._catalog.find_response_set(topic.response_key if topic else None)
        self._phase = ConversationPhase.THINKING
        if response_set is None:
            self._schedule(loop, self._reply_fallback())
        else:
            self._schedule(loop, self._reply_after_thinking(self._rng.choice(response_set.variants)))
        return True

    def submit_numeric_answer(self, raw_text: str) -> bool:
        """週に入れる日数（1〜6）を送信する。

        Returns:
            受け付けて遷移した場合は True。不正な値の場合はエラー文を設定して False。
        """
        if not self._accepting_input() or self._phase != ConversationPhase.AWAITING_NUMERIC_INPUT:
            return False

        count = _parse_week_count(raw_text)
        if count is None:
            self._numeric_error = self._catalog.numeric_error_text
            return False

        loop = _running_loop()
        if loop is None:
            return False

        self._numeric_error = ""
        self._append("user", self._catalog.numeric_echo_format.format(n=count))
        self._phase = ConversationPhase.THINKING
        self._schedule(loop, self._reply_after_thinking(self._catalog.week_count_responses[count]))
        return True

    def confirm_entry(self) -> ApplicationDraft | None:
        """プレビュー中の応募文を確定し、ヒアリング状態をリセットする。

        Returns:
            確定した応募内容。プレビュー中でなければ None。
        """
        if not self._accepting_input() or self._phase != ConversationPhase.ENTRY_PREVIEW:
            return None

        answers = self._hearing_answers
        keys = [step.key for step in self._catalog.hearing_steps]
        draft = ApplicationDraft(
            age=answers.get(keys[0], ""),
            work_style=answers.get(keys[1], ""),
            reason=answers.get(keys[2], ""),
            application_text=render_entry_text(self._catalog.entry_template, answers),
        )
        for text in self._catalog.closing_messages:
            self._append("bot", text)

        self._hearing_answers = {}
        self._hearing_step = 0
        self._entry_preview = None
        self._phase = ConversationPhase.ROOT
        self._confirmed.append(draft)
        return draft

    def open(self) -> None:
        """ウィジェットを開く。閉じていた場合は新しい会話を始める。"""
        if self._is_open:
            return
        self._reset()

    def close(self) -> None:
        """ウィジェットを閉じ、予約中の遷移を取り消す。"""
        self._cancel_pending()
        self._is_open = False

    async def wait_idle(self) -> None:
        """予約中の遷移がすべて終わるまで待つ。"""
        while self._pending is not None and not self._pending.done():
            await asyncio.wait({self._pending})

    def _accepting_input(self) -> bool:
        if not self._is_open:
            _LOG.debug("Ignored input while closed")
            return False
        if self.busy:
            _LOG.debug("Ignored input while a transition is pending")
            return False
        return True

    def _append(self, role: Role, text: str) -> None:
        self._history.append(Message(role=role, text=text))

    def _answer_hearing(self, label: str) -> bool:
        step = self._catalog.hearing_steps[self._hearing_step - 1]
        if label not in step.choices:
            _LOG.debug("Ignored choice %r outside hearing step %s", label, step.key)
            return False

        loop = _running_loop()
        if loop is None:
            return False

        self._hearing_answers[step.key] = label
        self._append("user", label)
        if self._hearing_step < len(self._catalog.hearing_steps):
            self._schedule(loop, self._advance_hearing_step())
        else:
            self._schedule(loop, self._show_entry_preview())
        return True

    def _schedule(self, loop: asyncio.AbstractEventLoop, coro: Coroutine[Any, Any, None]) -> None:
        self._pending = loop.create_task(coro)

    def _cancel_pending(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _start_hearing(self) -> None:
        await asyncio.sleep(self._timing.hearing_advance_delay)
        self._hearing_answers = {}
        self._hearing_step = 1
        self._phase = ConversationPhase.HEARING

    async def _advance_hearing_step(self) -> None:
        await asyncio.sleep(self._timing.hearing_advance_delay)
        self._hearing_step += 1

    async def _show_entry_preview(self) -> None:
        await asyncio.sleep(self._timing.preview_delay)
        self._entry_preview = render_entry_text(self._catalog.entry_template, self._hearing_answers)
        self._hearing_step = 0
        self._phase = ConversationPhase.ENTRY_PREVIEW

    async def _reply_fallback(self) -> None:
        await asyncio.sleep(self._timing.thinking_delay)
        self._append("bot", self._catalog.fallback_text)
        self._phase = ConversationPhase.ROOT

    async def _reply_after_thinking(self, answer: str) -> None:
        await asyncio.sleep(self._timing.thinking_delay)
        self._append("ai", self._catalog.thinking_text)
        placeholder = len(self._history) - 1
        await asyncio.sleep(self._timing.answer_delay)
        self._history[placeholder] = Message(role="bot", text=answer)
        self._phase = ConversationPhase.ROOT


def _running_loop() -> asyncio.AbstractEventLoop | None:
    """待ち時間付きの遷移を予約できるイベントループ。なければ None。"""
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        _LOG.debug("Ignored input outside a running event loop")
        return None


def _parse_week_count(raw_text: str) -> int | None:
    """半角数字だけで書かれた1〜6の整数なら返す。"""
    text = raw_text.strip()
    if not (text.isascii() and text.isdigit()):
        return None
    count = int(text)
    if count < 1 or count > WEEK_COUNT_MAX:
        return None
    return count
