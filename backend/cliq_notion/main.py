# backend/cliq_notion/main.py

"""
バックエンドアプリケーションのエントリーポイント。

主な責務:
- 共有インスタンス（Storage / 共有接続 / Cliq サービス / NotionService の生成関数）を
  起動時に 1 回だけ組み立てて app.state に載せる
- 機能ごとのルーターを登録する
  - /api/connection/status, /api/auth/notion/*
  - /api/tasks, /api/docs, /api/search, /api/notion/webhook
  - /api/activity
  - /api/settings
  - /api/cliq/slash, /api/cliq/message-action
- ヘルスチェックエンドポイント (/health)
"""

from typing import Optional

from fastapi import FastAPI

from cliq_notion.activity.router import router as activity_router
from cliq_notion.cliq.factory import build_cliq_service
from cliq_notion.cliq.router import router as cliq_router
from cliq_notion.cliq.service import CliqService
from cliq_notion.connection.provider import GlobalConnectionProvider, GlobalConnectionSource
from cliq_notion.connection.router import router as connection_router
from cliq_notion.dependencies import NotionServiceFactory
from cliq_notion.notion.client import NotionClient
from cliq_notion.notion.router import router as notion_router
from cliq_notion.notion.service import NotionService
from cliq_notion.settings.router import router as settings_router
from cliq_notion.storage import Storage
from cliq_notion.storage.database import (
    create_engine_from_config,
    create_session_factory,
    init_db,
)


def default_notion_service_factory(access_token: str) -> NotionService:
    return NotionService(NotionClient(access_token))


def build_storage() -> Storage:
    """
    環境変数の DB 設定から Storage を組み立てる（テーブルがなければ作成する）。
    """
    engine = create_engine_from_config()
    init_db(engine)
    return Storage(create_session_factory(engine))


def create_app(
    *,
    storage: Optional[Storage] = None,
    global_source: Optional[GlobalConnectionSource] = None,
    cliq_service: Optional[CliqService] = None,
    notion_service_factory: Optional[NotionServiceFactory] = None,
) -> FastAPI:
    """
    FastAPI アプリケーションファクトリ。

    引数を省略した共有インスタンスは環境変数の設定から生成する。
    テストではインメモリ DB の Storage やスタブを渡す。
    """
    app = FastAPI(title="Cliq Notion Widget Backend")

    app.state.storage = storage or build_storage()
    app.state.global_source = global_source or GlobalConnectionProvider()
    app.state.cliq_service = cliq_service or build_cliq_service()
    app.state.notion_service_factory = notion_service_factory or default_notion_service_factory

    # ルーター登録
    app.include_router(connection_router)
    app.include_router(notion_router)
    app.include_router(activity_router)
    app.include_router(settings_router)
    app.include_router(cliq_router)

    @app.get("/health", tags=["health"])
    def health_check() -> dict:
        """
        簡易ヘルスチェックエンドポイント。
        モニタリングや動作確認用。
        """
        return {"status": "ok"}

    return app


# uvicorn 実行時のエントリーポイント
app = create_app()
