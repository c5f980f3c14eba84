"""CatalogServiceのユニットテスト。"""

from pathlib import Path

import pytest
import yaml

from recruitbot.models.catalog import ChoiceKind
from recruitbot.models.errors import CatalogError
from recruitbot.services.catalog import CatalogService


class TestCatalogService:
    def test_load_bundled_catalog(self, catalog_service: CatalogService) -> None:
        catalog = catalog_service.load()
        assert [step.key for step in catalog.hearing_steps] == ["age", "workstyle", "reason"]
        assert catalog.find_topic("今のところ特にない").kind == ChoiceKind.ADVANCE_HEARING  # type: ignore[union-attr]
        assert catalog.find_topic("週◯くらいしか入れないかも…").kind == ChoiceKind.NUMERIC_INPUT  # type: ignore[union-attr]

    def test_load_is_cached(self, catalog_service: CatalogService) -> None:
        assert catalog_service.load() is catalog_service.load()

    def test_missing_file_raises_error(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogError):
            CatalogService(config_dir=tmp_path).load()

    def test_invalid_yaml_raises_error(self, tmp_path: Path) -> None:
        (tmp_path / "chatbot-catalog.yaml").write_text("topics: [unclosed", encoding="utf-8")
        with pytest.raises(CatalogError):
            CatalogService(config_dir=tmp_path).load()

    def test_non_mapping_raises_error(self, tmp_path: Path) -> None:
        (tmp_path / "chatbot-catalog.yaml").write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(CatalogError):
            CatalogService(config_dir=tmp_path).load_raw()

    def test_invalid_catalog_raises_error(self, tmp_path: Path, catalog_data: dict) -> None:
        catalog_data["hearing_steps"] = catalog_data["hearing_steps"][:2]
        (tmp_path / "chatbot-catalog.yaml").write_text(yaml.dump(catalog_data, allow_unicode=True), encoding="utf-8")
        with pytest.raises(CatalogError):
            CatalogService(config_dir=tmp_path).load()
