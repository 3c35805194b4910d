# backend/cliq_notion/dependencies.py

"""
FastAPI の Depends で使う依存関係の取得関数。

共有インスタンス（Storage / 共有接続 / Cliq サービス / Notion サービスの生成関数）は
main.create_app が起動時に 1 回だけ組み立てて app.state に載せる。
ここではそれを取り出すだけで、グローバル変数は持たない。
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from cliq_notion.activity.service import ActivityLogger
from cliq_notion.cliq.service import CliqService
from cliq_notion.connection.provider import GlobalConnectionSource
from cliq_notion.connection.service import ConnectionResolver, ConnectionService
from cliq_notion.notion.service import NotionService
from cliq_notion.storage import CliqUser, Storage, StorageError
from cliq_notion.users.config import get_identity_config
from cliq_notion.users.service import get_or_create_user

logger = logging.getLogger(__name__)

# アクセストークン -> NotionService
NotionServiceFactory = Callable[[str], NotionService]


@dataclass(frozen=True)
class CallerIdentity:
    """リクエストヘッダーから読み取った Cliq ユーザー情報。"""

    cliq_user_id: str
    display_name: Optional[str]
    email: Optional[str]


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_global_source(request: Request) -> GlobalConnectionSource:
    return request.app.state.global_source


def get_cliq_service(request: Request) -> CliqService:
    return request.app.state.cliq_service


def get_notion_service_factory(request: Request) -> NotionServiceFactory:
    return request.app.state.notion_service_factory


def get_activity_logger(storage: Storage = Depends(get_storage)) -> ActivityLogger:
    return ActivityLogger(storage)


def get_connection_resolver(
    storage: Storage = Depends(get_storage),
    global_source: GlobalConnectionSource = Depends(get_global_source),
) -> ConnectionResolver:
    return ConnectionResolver(storage, global_source)


def get_connection_service(
    storage: Storage = Depends(get_storage),
    global_source: GlobalConnectionSource = Depends(get_global_source),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> ConnectionService:
    return ConnectionService(storage, global_source, activity)


def get_caller_identity(
    x_cliq_user_id: Optional[str] = Header(None),
    x_cliq_display_name: Optional[str] = Header(None),
    x_cliq_email: Optional[str] = Header(None),
) -> CallerIdentity:
    """
    X-Cliq-User-Id / X-Cliq-Display-Name / X-Cliq-Email ヘッダーから呼び出し元を特定する。

    ヘッダーがない場合はデモ用の既定ユーザーとして扱う。
    """
    config = get_identity_config()
    return CallerIdentity(
        cliq_user_id=x_cliq_user_id or config.default_user_id,
        display_name=x_cliq_display_name or config.default_display_name,
        email=x_cliq_email,
    )


def resolve_user(storage: Storage, identity: CallerIdentity) -> CliqUser:
    return get_or_create_user(
        storage,
        identity.cliq_user_id,
        display_name=identity.display_name,
        email=identity.email,
    )


def get_current_user(
    storage: Storage = Depends(get_storage),
    identity: CallerIdentity = Depends(get_caller_identity),
) -> CliqUser:
    """
    呼び出し元の cliq_users 行を返す（初回は作成する）。

    - 永続化エラー → 500 Internal Server Error
    """
    try:
        return resolve_user(storage, identity)
    except StorageError as exc:
        logger.exception("Failed to resolve Cliq user %s.", identity.cliq_user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to resolve the Cliq user.",
        ) from exc
