"""チャットボット台本（カタログ）の読み込みを行うサービス。"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from recruitbot.models.catalog import ChatCatalog
from recruitbot.models.errors import CatalogError

_LOG = logging.getLogger(__name__)

CATALOG_FILENAME = "chatbot-catalog.yaml"


class CatalogService:
    """YAMLの台本定義を読み込み、検証済みのカタログとして提供する。"""

    def __init__(self, config_dir: Path) -> None:
        self._config_dir = config_dir
        self._catalog: ChatCatalog | None = None

    @property
    def catalog_file(self) -> Path:
        return self._config_dir / CATALOG_FILENAME

    def load_raw(self) -> dict[str, Any]:
        """台本定義ファイルをそのまま読み込む。

        Raises:
            CatalogError: ファイルが存在しない、またはYAMLとして読めない場合。
        """
        try:
            with open(self.catalog_file, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise CatalogError(f"カタログ定義ファイルが見つかりません: {self.catalog_file}") from None
        except yaml.YAMLError as e:
            raise CatalogError(f"カタログ定義ファイルを解析できません: {self.catalog_file}: {e}") from e
        if not isinstance(data, dict):
            raise CatalogError(f"カタログ定義ファイルの形式が不正です: {self.catalog_file}")
        return data

    def load(self) -> ChatCatalog:
        """検証済みのカタログを返す。初回のみファイルを読み込む。

        Raises:
            CatalogError: 読み込みまたは検証に失敗した場合。
        """
        if self._catalog is None:
            data = self.load_raw()
            try:
                self._catalog = ChatCatalog.model_validate(data)
            except ValidationError as e:
                raise CatalogError(f"カタログ定義が不正です: {e}") from e
            _LOG.info(
                "Loaded chat catalog: %d topics, %d response sets",
                len(self._catalog.topics),
                len(self._catalog.response_sets),
            )
        return self._catalog
