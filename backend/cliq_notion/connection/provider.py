# backend/cliq_notion/connection/provider.py

"""
共有（フォールバック）接続の情報源。

ユーザー個別のトークンがない場合に使う、ワークスペース共通の Notion 接続を表す。
Phase の現時点では環境変数で与えられた情報をそのまま返す。
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from cliq_notion.notion.config import GlobalConnectionConfig, get_global_connection_config

from .schemas import ConnectionStatus

DEFAULT_GLOBAL_WORKSPACE_NAME = "Connected Workspace"


class GlobalConnectionSource(Protocol):
    """
    共有接続の最小インターフェース。

    実装例:
    - GlobalConnectionProvider: 環境変数から読む
    - テスト用のスタブ
    """

    def describe(self) -> ConnectionStatus:  # pragma: no cover - Protocol
        ...

    def access_token(self) -> Optional[str]:  # pragma: no cover - Protocol
        ...


class GlobalConnectionProvider:
    """
    環境変数（NOTION_GLOBAL_*）から共有接続の情報を返す実装。

    config_loader を差し替えればテストから任意の値を与えられる。
    """

    def __init__(
        self,
        config_loader: Callable[[], GlobalConnectionConfig] = get_global_connection_config,
    ) -> None:
        self._config_loader = config_loader

    def describe(self) -> ConnectionStatus:
        config = self._config_loader()
        if not config.access_token:
            return ConnectionStatus(is_connected=False)

        return ConnectionStatus(
            is_connected=True,
            workspace_name=config.workspace_name or DEFAULT_GLOBAL_WORKSPACE_NAME,
            workspace_icon=config.workspace_icon,
            bot_id=config.bot_id,
        )

    def access_token(self) -> Optional[str]:
        return self._config_loader().access_token
