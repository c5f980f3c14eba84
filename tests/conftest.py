"""テスト共通フィクスチャ。"""

import random
from pathlib import Path

import pytest

from recruitbot.config import ServerConfig
from recruitbot.models.catalog import ChatCatalog
from recruitbot.models.conversation import ChatTiming
from recruitbot.services.catalog import CatalogService
from recruitbot.services.chat import ChatService
from recruitbot.services.engine import ConversationEngine
from recruitbot.storage.service import LocalApplicationStore


@pytest.fixture
def tmp_data_dir(tmp_path: Path) -> Path:
    """テスト用の一時データディレクトリ。"""
    return tmp_path / "recruitbot-test"


@pytest.fixture
def config_dir() -> Path:
    """設定ファイルディレクトリ。"""
    return Path(__file__).parent.parent / "config"


@pytest.fixture
def catalog_service(config_dir: Path) -> CatalogService:
    """テスト用CatalogService。"""
    return CatalogService(config_dir=config_dir)


@pytest.fixture
def catalog(catalog_service: CatalogService) -> ChatCatalog:
    """リポジトリ同梱の台本。"""
    return catalog_service.load()


@pytest.fixture
def catalog_data(catalog_service: CatalogService) -> dict:
    """台本定義の生データ。検証エラーのテストで書き換えて使う。"""
    return catalog_service.load_raw()


@pytest.fixture
def engine(catalog: ChatCatalog) -> ConversationEngine:
    """待ち時間なし・乱数固定の会話エンジン。"""
    return ConversationEngine(catalog, timing=ChatTiming.immediate(), rng=random.Random(0))


@pytest.fixture
def slow_engine(catalog: ChatCatalog) -> ConversationEngine:
    """遷移が予約されたまま残る会話エンジン。"""
    timing = ChatTiming(hearing_advance_delay=60, preview_delay=60, thinking_delay=60, answer_delay=60)
    return ConversationEngine(catalog, timing=timing, rng=random.Random(0))


@pytest.fixture
def store(tmp_data_dir: Path) -> LocalApplicationStore:
    """テスト用LocalApplicationStore。"""
    return LocalApplicationStore(data_dir=tmp_data_dir)


@pytest.fixture
def chat_service(catalog_service: CatalogService, store: LocalApplicationStore) -> ChatService:
    """テスト用ChatService。"""
    return ChatService(catalog_service, store, timing=ChatTiming.immediate(), rng_factory=lambda: random.Random(0))


@pytest.fixture
def server_config(tmp_data_dir: Path, config_dir: Path) -> ServerConfig:
    """テスト用ServerConfig。"""
    return ServerConfig(
        data_dir=tmp_data_dir,
        config_dir=config_dir,
        hearing_advance_delay=0,
        preview_delay=0,
        thinking_delay=0,
        answer_delay=0,
    )
