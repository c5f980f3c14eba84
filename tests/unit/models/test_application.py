"""応募データモデルのユニットテスト。"""

from datetime import UTC, datetime

from recruitbot.models.application import CONTACT_METHODS, Application, ApplicationDraft, ApplicationSummary


class TestApplication:
    def test_defaults(self) -> None:
        application = Application(id="app-1")
        assert application.contact_method == "LINE"
        assert application.name is None
        assert application.interview_time is None

    def test_has_timestamp(self) -> None:
        before = datetime.now(UTC)
        application = Application(id="app-1")
        after = datetime.now(UTC)
        assert before <= application.created_at <= after

    def test_from_draft_fields(self) -> None:
        draft = ApplicationDraft(age="18〜19歳", work_style="短期から始めたい", reason="", application_text="text")
        application = Application(id="app-2", **draft.model_dump())
        assert application.work_style == "短期から始めたい"
        assert application.reason == ""


class TestContactMethods:
    def test_known_contact_methods(self) -> None:
        assert CONTACT_METHODS == ("LINE", "メール", "電話")

    def test_summary_starts_with_zero_counts(self) -> None:
        summary = ApplicationSummary(year=2026, month=10)
        assert summary.total == 0
        assert summary.by_contact_method == {"LINE": 0, "メール": 0, "電話": 0}
