"""FastMCPベースのMCPサーバーエントリポイント。"""

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from recruitbot.config import ServerConfig
from recruitbot.resources.catalog import register_catalog_resources
from recruitbot.services.catalog import CatalogService
from recruitbot.services.chat import ChatService
from recruitbot.services.entries import EntryService
from recruitbot.storage.factory import create_application_store
from recruitbot.tools.chat import register_chat_tools
from recruitbot.tools.entries import register_entry_tools


def create_server(config: ServerConfig | None = None) -> FastMCP:
    """recruitbot MCPサーバーを作成し、ツール・リソースを登録する。

    Args:
        config: サーバー設定。Noneの場合はデフォルト設定を使用。

    Returns:
        設定済みのFastMCPインスタンス。
    """
    if config is None:
        config = ServerConfig()

    mcp = FastMCP("recruitbot")

    # データアクセス層
    store = create_application_store(config)
    catalog_service = CatalogService(config_dir=config.config_dir)

    # サービス層
    chat_service = ChatService(
        catalog_service,
        store,
        timing=config.timing(),
        max_sessions=config.max_sessions,
    )
    entry_service = EntryService(store, timezone=config.admin_timezone)

    # MCPインターフェース登録 — チャット層
    register_chat_tools(mcp, chat_service)
    register_catalog_resources(mcp, catalog_service)

    # MCPインターフェース登録 — 応募データ管理
    register_entry_tools(mcp, entry_service)

    # ヘルスチェックエンドポイント
    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok"})

    return mcp
