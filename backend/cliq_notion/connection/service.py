# backend/cliq_notion/connection/service.py

"""
Notion 接続状態の判定と、接続 / 切断操作のサービス層。

責務:
- ユーザー個別トークンがあればそれを「接続済み」とみなす
- なければ共有接続の状態をそのまま返す（共有接続側の失敗は「未接続」として扱う）
- 接続 / 切断時にトークンを保存 / 削除し、操作履歴を残す
"""

import logging
from typing import Optional

from cliq_notion.activity.service import ActivityLogger
from cliq_notion.storage import ActivityKind, CliqUser, NewNotionToken, NotionToken, Storage

from .provider import GlobalConnectionSource
from .schemas import ConnectionStatus

logger = logging.getLogger(__name__)

DEFAULT_USER_WORKSPACE_NAME = "Your Workspace"


class ConnectionResolver:
    """
    ユーザーにとっての「接続済み」を判定する。
    """

    def __init__(self, storage: Storage, global_source: GlobalConnectionSource) -> None:
        self._storage = storage
        self._global_source = global_source

    def resolve(self, user: CliqUser) -> ConnectionStatus:
        """
        接続状態を返す。

        共有接続側で例外が起きても送出せず、未接続として返す。
        トークン参照時の永続化エラーは呼び出し側に送出する。
        """
        token = self._storage.get_notion_token(user.id)
        if token is not None:
            return ConnectionStatus(
                is_connected=True,
                workspace_name=token.workspace_name or DEFAULT_USER_WORKSPACE_NAME,
                workspace_icon=token.workspace_icon,
            )

        try:
            return self._global_source.describe()
        except Exception:  # noqa: BLE001 - 共有接続の失敗は未接続として扱う
            logger.warning(
                "Global Notion connection lookup failed; reporting not connected.",
                exc_info=True,
            )
            return ConnectionStatus(is_connected=False)


class ConnectionService:
    """
    接続 / 切断操作。

    本物の OAuth フローは持たず、共有接続のトークンをユーザー個別のトークンとして保存することで
    「接続」を模擬する。
    """

    def __init__(
        self,
        storage: Storage,
        global_source: GlobalConnectionSource,
        activity: ActivityLogger,
    ) -> None:
        self._storage = storage
        self._global_source = global_source
        self._activity = activity

    def connect_with_global(self, user: CliqUser) -> Optional[NotionToken]:
        """
        共有接続が使える場合、そのトークンをユーザーのトークンとして保存する。

        :return: 保存したトークン行。共有接続が使えない場合は None。
        """
        info = self._global_source.describe()
        access_token = self._global_source.access_token()
        if not info.is_connected or not access_token:
            logger.info("Global Notion connection is not available; nothing to connect.")
            return None

        token = self._storage.upsert_notion_token(
            NewNotionToken(
                cliq_user_id=user.id,
                access_token=access_token,
                bot_id=info.bot_id,
                workspace_name=info.workspace_name,
                workspace_icon=info.workspace_icon,
            )
        )
        self._activity.log(
            user.id,
            ActivityKind.CONNECTED,
            f"Connected Notion workspace: {info.workspace_name or 'Workspace'}",
        )
        return token

    def disconnect(self, user: CliqUser) -> None:
        """トークンを削除して切断を記録する（トークンがなくてもエラーにしない）。"""
        self._storage.delete_notion_token(user.id)
        self._activity.log(
            user.id,
            ActivityKind.DISCONNECTED,
            "Disconnected Notion workspace",
        )
