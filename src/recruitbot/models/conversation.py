"""チャット会話の状態関連のデータモデル。"""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["bot", "user", "ai", "notice"]


class ConversationPhase(StrEnum):
    """会話エンジンの状態。"""

    ROOT = "root"
    AWAITING_NUMERIC_INPUT = "awaiting_numeric_input"
    THINKING = "thinking"
    HEARING = "hearing"
    ENTRY_PREVIEW = "entry_preview"


class Message(BaseModel):
    """会話履歴の1エントリ。"""

    model_config = ConfigDict(frozen=True)

    role: Role
    text: str


class ChatTiming(BaseModel):
    """「考え中」演出などの待ち時間（秒）。"""

    hearing_advance_delay: float = Field(default=0.3, ge=0)
    preview_delay: float = Field(default=0.5, ge=0)
    thinking_delay: float = Field(default=0.8, ge=0)
    answer_delay: float = Field(default=1.0, ge=0)

    @classmethod
    def immediate(cls) -> "ChatTiming":
        """待ち時間なしの設定。"""
        return cls(hearing_advance_delay=0, preview_delay=0, thinking_delay=0, answer_delay=0)


class ChatState(BaseModel):
    """表示層に渡す会話状態のスナップショット。"""

    model_config = ConfigDict(frozen=True)

    is_open: bool
    phase: ConversationPhase
    busy: bool
    hearing_step: int
    prompt: str | None
    choices: list[str]
    history: list[Message]
    hearing_answers: dict[str, str]
    awaiting_numeric_input: bool
    numeric_error: str
    entry_preview: str | None
