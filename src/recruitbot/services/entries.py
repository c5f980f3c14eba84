"""管理画面向けの応募データ参照・集計サービス。"""

import logging
from collections import Counter
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from recruitbot.models.application import Application, ApplicationSummary
from recruitbot.models.errors import ConfigError, InvalidPeriodError
from recruitbot.storage.base import ApplicationStore

_LOG = logging.getLogger(__name__)


class EntryService:
    """保存済みの応募を月単位で絞り込み、連絡手段別・日別に集計する。

    月の境界は管理画面のタイムゾーン（既定は Asia/Tokyo）で判定する。

    Args:
        store: 応募データの保存先。
        timezone: 月・日の判定に使うタイムゾーン名。
    """

    def __init__(self, store: ApplicationStore, *, timezone: str = "Asia/Tokyo") -> None:
        try:
            self._tz = ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"Unknown timezone: {timezone}") from e
        self._store = store

    async def list_applications(self, year: int | None = None, month: int | None = None) -> list[Application]:
        """応募を新しい順に返す。年月を指定した場合はその月の応募だけを返す。

        Raises:
            InvalidPeriodError: 年と月の片方だけが指定された場合、または月が1〜12でない場合。
        """
        applications = await self._store.list_all()
        if year is None and month is None:
            return applications
        year, month = _check_period(year, month)
        return [a for a in applications if self._in_month(a, year, month)]

    async def get_application(self, application_id: str) -> Application:
        return await self._store.get(application_id)

    async def delete_applications(self, application_ids: list[str]) -> int:
        deleted = await self._store.delete(application_ids)
        _LOG.info("Deleted %d application(s)", deleted)
        return deleted

    async def summarize(self, year: int, month: int) -> ApplicationSummary:
        """指定月の応募件数を連絡手段別・日別に集計する。

        連絡手段は LINE・メール・電話 の3つを常に含み、それ以外の値は
        合計にだけ数える。
        """
        applications = await self.list_applications(year, month)
        summary = ApplicationSummary(year=year, month=month, total=len(applications))
        for application in applications:
            if application.contact_method in summary.by_contact_method:
                summary.by_contact_method[application.contact_method] += 1
        days = Counter(self._local(a.created_at).date().isoformat() for a in applications)
        summary.daily = dict(sorted(days.items()))
        return summary

    def _local(self, moment: datetime) -> datetime:
        return moment.astimezone(self._tz)

    def _in_month(self, application: Application, year: int, month: int) -> bool:
        created = self._local(application.created_at)
        return created.year == year and created.month == month


def _check_period(year: int | None, month: int | None) -> tuple[int, int]:
    if year is None or month is None:
        raise InvalidPeriodError("year and month must be given together")
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"month must be between 1 and 12: {month}")
    return year, month
