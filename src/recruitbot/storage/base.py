"""応募データストアの抽象インターフェース。"""

from abc import ABC, abstractmethod

from recruitbot.models.application import Application


class ApplicationStore(ABC):
    """確定した応募データの保存先。"""

    @abstractmethod
    async def save(self, application: Application) -> None:
        """応募データを保存する。"""

    @abstractmethod
    async def get(self, application_id: str) -> Application:
        """応募データを取得する。

        Raises:
            ApplicationNotFoundError: 応募データが存在しない場合。
        """

    @abstractmethod
    async def list_all(self) -> list[Application]:
        """応募データを新しい順に返す。"""

    @abstractmethod
    async def delete(self, application_ids: list[str]) -> int:
        """応募データを削除し、削除件数を返す。"""
