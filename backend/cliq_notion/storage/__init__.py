# backend/cliq_notion/storage/__init__.py

"""
永続化レイヤ用モジュール群。

構成:
- models: テーブル定義（SQLAlchemy ORM）
- schemas: 書き込み入力のスキーマ
- database: エンジン / セッションファクトリの生成
- repository: Storage 本体と例外定義
"""

from .models import (
    ActivityEntry,
    ActivityKind,
    CliqUser,
    Mapping,
    NotificationSettings,
    NotionToken,
)
from .repository import (
    DEFAULT_ACTIVITY_LIMIT,
    Storage,
    StorageError,
    StoreUnavailable,
    UniquenessViolation,
)
from .schemas import NewActivity, NewCliqUser, NewMapping, NewNotionToken, SettingsUpdate

__all__ = [
    "ActivityEntry",
    "ActivityKind",
    "CliqUser",
    "Mapping",
    "NotificationSettings",
    "NotionToken",
    "DEFAULT_ACTIVITY_LIMIT",
    "Storage",
    "StorageError",
    "StoreUnavailable",
    "UniquenessViolation",
    "NewActivity",
    "NewCliqUser",
    "NewMapping",
    "NewNotionToken",
    "SettingsUpdate",
]
