"""応募データストアの生成。"""

from recruitbot.config import ServerConfig
from recruitbot.models.errors import ConfigError
from recruitbot.storage.base import ApplicationStore
from recruitbot.storage.service import LocalApplicationStore


def create_application_store(config: ServerConfig) -> ApplicationStore:
    """設定に応じた応募データストアを生成する。

    Raises:
        ConfigError: supabase が指定されているのに接続情報がない場合。
    """
    if config.application_store == "supabase":
        if not (config.supabase_url and config.supabase_key):
            raise ConfigError("RECRUITBOT_SUPABASE_URL and RECRUITBOT_SUPABASE_KEY must be set")
        # supabase パッケージはこの経路でのみ読み込む
        from recruitbot.storage.supabase import SupabaseApplicationStore, SupabaseClientManager

        return SupabaseApplicationStore(SupabaseClientManager(config.supabase_url, config.supabase_key))
    return LocalApplicationStore(data_dir=config.data_dir)
