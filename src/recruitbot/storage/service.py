"""ローカルファイルシステムベースの応募データストア。"""

import json
from pathlib import Path

from recruitbot.models.application import Application
from recruitbot.models.errors import ApplicationNotFoundError, StorageError
from recruitbot.storage.base import ApplicationStore


class LocalApplicationStore(ApplicationStore):
    """ローカルファイルシステムを利用した応募データの永続化層。

    1件の応募を1つのJSONファイルとして保存する。
    """

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._applications_dir = data_dir / "applications"

    def _application_file(self, application_id: str) -> Path:
        # ディレクトリトラバーサル防止
        safe_id = Path(application_id).name
        if not safe_id or safe_id != application_id:
            raise StorageError(f"Invalid application ID: {application_id}")
        return self._applications_dir / f"{safe_id}.json"

    async def save(self, application: Application) -> None:
        """応募データをファイルシステムに保存する。

        Raises:
            StorageError: 書き込みに失敗した場合。
        """
        application_file = self._application_file(application.id)
        try:
            self._applications_dir.mkdir(parents=True, exist_ok=True)
            application_file.write_text(application.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to write application {application.id}: {e}") from e

    async def get(self, application_id: str) -> Application:
        """応募データをファイルシステムから読み込む。

        Raises:
            ApplicationNotFoundError: 応募データが存在しない場合。
        """
        application_file = self._application_file(application_id)
        if not application_file.exists():
            raise ApplicationNotFoundError(application_id)
        data = json.loads(application_file.read_text(encoding="utf-8"))
        return Application.model_validate(data)

    async def list_all(self) -> list[Application]:
        """保存されている応募データを新しい順に返す。"""
        if not self._applications_dir.exists():
            return []
        applications = [
            Application.model_validate_json(f.read_text(encoding="utf-8"))
            for f in self._applications_dir.glob("*.json")
        ]
        return sorted(applications, key=lambda a: a.created_at, reverse=True)

    async def delete(self, application_ids: list[str]) -> int:
        """応募データをファイルシステムから削除する。存在しないIDは無視する。"""
        deleted = 0
        for application_id in application_ids:
            application_file = self._application_file(application_id)
            if application_file.exists():
                application_file.unlink()
                deleted += 1
        return deleted
