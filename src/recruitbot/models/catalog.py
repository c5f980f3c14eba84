"""チャットボットの台本（カタログ）関連のデータモデル。"""

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator

HEARING_STEP_COUNT = 3
WEEK_COUNT_MAX = 6


class ChoiceKind(StrEnum):
    """選択肢を選んだときの遷移の種類。"""

    CANNED_ANSWER = "canned_answer"
    NUMERIC_INPUT = "numeric_input"
    ADVANCE_HEARING = "advance_hearing"
    TERMINAL = "terminal"


class Topic(BaseModel):
    """トップメニューに並ぶ相談テーマ。"""

    label: str
    kind: ChoiceKind = ChoiceKind.CANNED_ANSWER
    response_key: str | None = None


class ResponseSet(BaseModel):
    """テーマごとの定型返答バリエーション。"""

    topic_key: str
    variants: list[str] = Field(min_length=1)


class HearingStep(BaseModel):
    """応募文ヒアリングの1ステップ。"""

    key: str
    label: str
    choices: list[str] = Field(min_length=1)


class Choice(BaseModel):
    """画面に提示する選択肢。"""

    label: str
    kind: ChoiceKind
    response_key: str | None = None


class QuestionNode(BaseModel):
    """ボットの発話と、それに対する選択肢の組。"""

    id: str
    prompt_text: str
    choices: list[Choice]


class ChatCatalog(BaseModel):
    """会話エンジンが読み取り専用で参照する台本一式。"""

    notice: str
    greeting: str
    thinking_text: str = "（考え中…）"
    fallback_text: str = "その質問への返事は今準備中だよ〜！"
    numeric_prompt: str = "週何日くらい入れそう？1〜6の数字で教えてね！"
    numeric_error_text: str = "1〜6の数字で入力してね！"
    numeric_echo_format: str = "週{n}くらい"
    topics: list[Topic] = Field(min_length=1)
    response_sets: list[ResponseSet] = Field(default_factory=list)
    week_count_responses: list[str]
    hearing_steps: list[HearingStep]
    entry_template: str
    preview_label: str = "応募文プレビュー"
    confirm_label: str = "この内容で応募する"
    closing_messages: list[str] = Field(default_factory=list)

    @field_validator("hearing_steps")
    @classmethod
    def _check_hearing_steps(cls, steps: list[HearingStep]) -> list[HearingStep]:
        if len(steps) != HEARING_STEP_COUNT:
            raise ValueError(f"hearing_steps must have exactly {HEARING_STEP_COUNT} steps, got {len(steps)}")
        keys = [step.key for step in steps]
        if len(set(keys)) != len(keys):
            raise ValueError(f"hearing step keys must be unique: {keys}")
        return steps

    @field_validator("week_count_responses")
    @classmethod
    def _check_week_count_responses(cls, responses: list[str]) -> list[str]:
        # 1始まりの表。0番目は未使用の空文字
        if len(responses) != WEEK_COUNT_MAX + 1:
            raise ValueError(f"week_count_responses must have {WEEK_COUNT_MAX + 1} entries, got {len(responses)}")
        if responses[0] != "":
            raise ValueError("week_count_responses[0] must be an empty string")
        if not all(text.strip() for text in responses[1:]):
            raise ValueError("week_count_responses[1..6] must not be empty")
        return responses

    @model_validator(mode="after")
    def _check_topics(self) -> "ChatCatalog":
        labels = [topic.label for topic in self.topics]
        if len(set(labels)) != len(labels):
            raise ValueError("topic labels must be unique")
        for kind in (ChoiceKind.NUMERIC_INPUT, ChoiceKind.ADVANCE_HEARING):
            if sum(1 for topic in self.topics if topic.kind == kind) > 1:
                raise ValueError(f"at most one topic may have kind '{kind}'")
        if any(topic.kind == ChoiceKind.TERMINAL for topic in self.topics):
            raise ValueError("terminal choices are reserved for the entry preview")
        return self

    def find_topic(self, label: str) -> Topic | None:
        """ラベルに一致するテーマを返す。"""
        return next((topic for topic in self.topics if topic.label == label), None)

    def find_response_set(self, topic_key: str | None) -> ResponseSet | None:
        """キーに一致する返答セットを返す。"""
        if topic_key is None:
            return None
        return next((rs for rs in self.response_sets if rs.topic_key == topic_key), None)

    def root_node(self) -> QuestionNode:
        """トップメニューのノード。"""
        return QuestionNode(
            id="root",
            prompt_text=self.greeting,
            choices=[Choice(label=t.label, kind=t.kind, response_key=t.response_key) for t in self.topics],
        )

    def hearing_node(self, step: int) -> QuestionNode:
        """ヒアリングの step 番目（1始まり）のノード。"""
        hearing_step = self.hearing_steps[step - 1]
        return QuestionNode(
            id=f"hearing:{hearing_step.key}",
            prompt_text=hearing_step.label,
            choices=[Choice(label=c, kind=ChoiceKind.ADVANCE_HEARING) for c in hearing_step.choices],
        )

    def preview_node(self) -> QuestionNode:
        """応募文プレビューのノード。選択肢は確定ボタンのみ。"""
        return QuestionNode(
            id="entry_preview",
            prompt_text=self.preview_label,
            choices=[Choice(label=self.confirm_label, kind=ChoiceKind.TERMINAL)],
        )
