# backend/cliq_notion/connection/router.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse

from cliq_notion.dependencies import (
    CallerIdentity,
    get_caller_identity,
    get_connection_resolver,
    get_connection_service,
    get_current_user,
    get_storage,
    resolve_user,
)
from cliq_notion.storage import CliqUser, Storage, StorageError

from .schemas import ConnectionStatus, DisconnectResponse
from .service import ConnectionResolver, ConnectionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["connection"])

_RESULT_PAGE = """<html>
  <head>
    <style>
      body {{ font-family: Inter, sans-serif; display: flex; align-items: center;
             justify-content: center; min-height: 100vh; margin: 0; background: #f5f5f5; }}
      .card {{ background: white; padding: 2rem; border-radius: 8px;
               box-shadow: 0 2px 8px rgba(0,0,0,0.1); max-width: 400px; text-align: center; }}
      .mark {{ color: {color}; font-size: 48px; margin-bottom: 1rem; }}
      h1 {{ margin: 0 0 1rem; font-size: 1.5rem; }}
      p {{ color: #666; margin: 0 0 1.5rem; }}
    </style>
  </head>
  <body>
    <div class="card">
      <div class="mark">{mark}</div>
      <h1>{heading}</h1>
      <p>{body}</p>
      <button onclick="window.close()">Close Window</button>
    </div>
  </body>
</html>"""


@router.get(
    "/connection/status",
    response_model=ConnectionStatus,
    response_model_exclude_none=True,
    summary="Notion 接続状態の取得",
)
def get_connection_status(
    identity: CallerIdentity = Depends(get_caller_identity),
    storage: Storage = Depends(get_storage),
    resolver: ConnectionResolver = Depends(get_connection_resolver),
) -> ConnectionStatus:
    """
    ユーザー個別トークン → 共有接続の順に接続状態を判定する。

    - どの段階で失敗しても 500 にはせず、未接続として返す
    """
    try:
        user = resolve_user(storage, identity)
        return resolver.resolve(user)
    except Exception:  # noqa: BLE001 - ウィジェットには未接続として見せる
        logger.exception("Failed to resolve connection status.")
        return ConnectionStatus(is_connected=False)


@router.get(
    "/auth/notion/start",
    response_class=HTMLResponse,
    summary="Notion 接続（OAuth の模擬）",
    description="共有接続のトークンをユーザー個別のトークンとして保存し、結果ページを返す。",
)
def start_notion_auth(
    user: CliqUser = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
) -> HTMLResponse:
    try:
        token = service.connect_with_global(user)
    except StorageError as exc:
        logger.exception("Failed to store Notion token for user %s.", user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error connecting to Notion",
        ) from exc

    if token is None:
        page = _RESULT_PAGE.format(
            color="#ef4444",
            mark="!",
            heading="Notion Unavailable",
            body="No Notion workspace is available to connect right now. Please try again later.",
        )
    else:
        page = _RESULT_PAGE.format(
            color="#10b981",
            mark="✓",
            heading="Notion Connected!",
            body=(
                "Your Notion workspace is now connected to Zoho Cliq. "
                "You can close this window and return to Cliq."
            ),
        )
    return HTMLResponse(content=page)


@router.post(
    "/auth/notion/disconnect",
    response_model=DisconnectResponse,
    summary="Notion 接続の解除",
)
def disconnect_notion(
    user: CliqUser = Depends(get_current_user),
    service: ConnectionService = Depends(get_connection_service),
) -> DisconnectResponse:
    try:
        service.disconnect(user)
    except StorageError as exc:
        logger.exception("Failed to disconnect Notion for user %s.", user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to disconnect Notion.",
        ) from exc

    return DisconnectResponse(success=True)
