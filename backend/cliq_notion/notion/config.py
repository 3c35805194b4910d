# backend/cliq_notion/notion/config.py

"""
Notion 連携に必要な設定値をまとめるモジュール。

- NotionConfig: API の接続先（全ユーザー共通）
- GlobalConnectionConfig: ユーザー個別トークンがない場合に使う共有接続の情報
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from cliq_notion.utils.config import get_env, get_env_int


@dataclass(frozen=True)
class NotionConfig:
    """Notion API 用の設定値コンテナ。"""

    api_base_url: str
    api_version: str
    timeout_seconds: int = 10


@dataclass(frozen=True)
class GlobalConnectionConfig:
    """共有（フォールバック）接続の設定値。access_token が空なら未接続扱い。"""

    access_token: Optional[str]
    workspace_name: Optional[str]
    workspace_icon: Optional[str]
    bot_id: Optional[str]


@lru_cache()
def get_notion_config() -> NotionConfig:
    """
    環境変数から Notion 設定を読み込む。

    任意:
      - NOTION_API_BASE_URL    (デフォルト: https://api.notion.com/v1)
      - NOTION_API_VERSION     (デフォルト: 2022-06-28)
      - NOTION_TIMEOUT_SECONDS (デフォルト: 10)

    API キーはユーザーごとのトークンを使うため、ここでは扱わない。
    """
    api_base_url = get_env(
        "NOTION_API_BASE_URL",
        default="https://api.notion.com/v1",
        required=False,
    )
    api_version = get_env(
        "NOTION_API_VERSION",
        default="2022-06-28",
        required=False,
    )

    return NotionConfig(
        api_base_url=api_base_url,
        api_version=api_version,
        timeout_seconds=get_env_int("NOTION_TIMEOUT_SECONDS", default=10),
    )


def get_global_connection_config() -> GlobalConnectionConfig:
    """
    共有接続の情報を環境変数から読み込む。

    任意:
      - NOTION_GLOBAL_ACCESS_TOKEN
      - NOTION_GLOBAL_WORKSPACE_NAME
      - NOTION_GLOBAL_WORKSPACE_ICON
      - NOTION_GLOBAL_BOT_ID

    運用中に差し替えられるようにキャッシュはしない。
    """
    return GlobalConnectionConfig(
        access_token=get_env("NOTION_GLOBAL_ACCESS_TOKEN", required=False),
        workspace_name=get_env("NOTION_GLOBAL_WORKSPACE_NAME", required=False),
        workspace_icon=get_env("NOTION_GLOBAL_WORKSPACE_ICON", required=False),
        bot_id=get_env("NOTION_GLOBAL_BOT_ID", required=False),
    )
