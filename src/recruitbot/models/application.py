"""応募データ関連のデータモデル。"""

from datetime import UTC, datetime
from typing import Literal, get_args

from pydantic import BaseModel, Field

ContactMethod = Literal["LINE", "メール", "電話"]
CONTACT_METHODS: tuple[str, ...] = get_args(ContactMethod)
DEFAULT_CONTACT_METHOD: ContactMethod = "LINE"


class ApplicationDraft(BaseModel):
    """ヒアリング確定時に会話エンジンが組み立てる応募内容。"""

    age: str = ""
    work_style: str = ""
    reason: str = ""
    application_text: str


class Application(BaseModel):
    """保存される応募データ。

    contact_method は通常 CONTACT_METHODS のいずれか。既存の行に
    それ以外の値が入っていても読み込めるよう str のまま持つ。
    """

    id: str
    contact_method: str = DEFAULT_CONTACT_METHOD
    name: str | None = None
    age: str | None = None
    work_style: str | None = None
    reason: str | None = None
    application_text: str | None = None
    interview_time: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ApplicationSummary(BaseModel):
    """1か月分の応募件数の集計。"""

    year: int
    month: int = Field(ge=1, le=12)
    total: int = 0
    by_contact_method: dict[str, int] = Field(default_factory=lambda: dict.fromkeys(CONTACT_METHODS, 0))
    daily: dict[str, int] = Field(default_factory=dict)
