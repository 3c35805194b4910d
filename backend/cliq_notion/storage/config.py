# backend/cliq_notion/storage/config.py

"""
永続化レイヤの設定値をまとめるモジュール。
"""

from dataclasses import dataclass

from cliq_notion.utils.config import get_env, get_env_bool

DEFAULT_DATABASE_URL = "sqlite:///./cliq_notion.db"


@dataclass(frozen=True)
class DatabaseConfig:
    """DB 接続用の設定値コンテナ。"""

    database_url: str
    echo: bool = False


def get_database_config() -> DatabaseConfig:
    """
    環境変数から DB 設定を読み込む。

    任意:
      - DATABASE_URL (デフォルト: sqlite:///./cliq_notion.db)
      - SQL_ECHO     (デフォルト: false)

    本番では postgresql+psycopg://... を指定する想定。
    """
    database_url = get_env(
        "DATABASE_URL",
        default=DEFAULT_DATABASE_URL,
        required=False,
    )
    return DatabaseConfig(
        database_url=database_url,
        echo=get_env_bool("SQL_ECHO", default=False),
    )
