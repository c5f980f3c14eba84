"""recruitbotサーバーの設定管理。"""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

from recruitbot.models.conversation import ChatTiming

_PACKAGE_ROOT = Path(__file__).parent
_REPO_ROOT = _PACKAGE_ROOT.parent.parent


class ServerConfig(BaseSettings):
    """サーバー設定。環境変数から読み込み可能。"""

    model_config = {"env_prefix": "RECRUITBOT_"}

    data_dir: Path = _REPO_ROOT / ".recruitbot"
    config_dir: Path = _REPO_ROOT / "config"
    host: str = "0.0.0.0"
    port: int = 8000
    url_token: str = ""
    log_level: str = "INFO"

    # 応募データの保存先
    application_store: Literal["local", "supabase"] = "local"
    supabase_url: str = ""
    supabase_key: str = ""

    # 管理画面の月別集計に使うタイムゾーン
    admin_timezone: str = "Asia/Tokyo"

    # チャットセッション
    max_sessions: int = 200

    # 「考え中」演出の待ち時間（秒）
    hearing_advance_delay: float = 0.3
    preview_delay: float = 0.5
    thinking_delay: float = 0.8
    answer_delay: float = 1.0

    def timing(self) -> ChatTiming:
        """会話エンジン用の待ち時間設定を返す。"""
        return ChatTiming(
            hearing_advance_delay=self.hearing_advance_delay,
            preview_delay=self.preview_delay,
            thinking_delay=self.thinking_delay,
            answer_delay=self.answer_delay,
        )
