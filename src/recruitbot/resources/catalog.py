"""チャット台本のMCPリソース定義。"""

import yaml
from fastmcp import FastMCP

from recruitbot.services.catalog import CatalogService


def register_catalog_resources(mcp: FastMCP, catalog_service: CatalogService) -> None:
    """台本関連のMCPリソースを登録する。"""

    @mcp.resource("recruitbot://chat/catalog")
    async def chat_catalog() -> str:
        """チャットボットの台本定義全体を取得する。

        トップメニューのテーマ、定型返答、週日数の返答表、ヒアリング手順を含みます。
        """
        data = catalog_service.load_raw()
        return yaml.dump(data, allow_unicode=True, default_flow_style=False, sort_keys=False)

    @mcp.resource("recruitbot://chat/hearing-steps")
    async def hearing_steps() -> str:
        """応募文ヒアリングの3ステップ（年代・働き方・応募理由）を取得する。"""
        catalog = catalog_service.load()
        data = {
            "hearing_steps": [step.model_dump() for step in catalog.hearing_steps],
            "entry_template": catalog.entry_template,
        }
        return yaml.dump(data, allow_unicode=True, default_flow_style=False, sort_keys=False)
