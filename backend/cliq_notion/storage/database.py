# backend/cliq_notion/storage/database.py

"""
SQLAlchemy のエンジン / セッションファクトリ生成を担当するモジュール。

- プロセス起動時に 1 回だけ create_engine_from_config() を呼び、
  得られたセッションファクトリを Storage に渡す（main.create_app が組み立て役）。
- SQLite の場合は外部キー制約を有効化する（ON DELETE CASCADE を効かせるため）。
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import DatabaseConfig, get_database_config
from .models import Base


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_from_config(config: Optional[DatabaseConfig] = None) -> Engine:
    """
    DatabaseConfig から Engine を生成する。

    - sqlite:// (インメモリ) はテスト用途なので StaticPool で 1 接続を共有する
    - それ以外は pool_pre_ping を有効にして切断済みコネクションを検出する
    """
    config = config or get_database_config()
    url = config.database_url

    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=config.echo, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        url,
        echo=config.echo,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Storage 用のセッションファクトリを生成する。"""
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


def init_db(engine: Engine) -> None:
    """テーブルを作成する（既存テーブルはそのまま）。"""
    Base.metadata.create_all(bind=engine)
