# backend/cliq_notion/storage/models.py

"""
永続化テーブル定義（SQLAlchemy ORM）。

- cliq_users            : Zoho Cliq ユーザー（外部 ID ごとに 1 行）
- notion_tokens         : ユーザーごとの Notion OAuth トークン
- mappings              : Cliq のメッセージ / チャンネルと Notion ページの対応
- notification_settings : 通知設定（ユーザーごとに 1 行）
- activity_log          : 操作履歴（追記のみ）

ユーザー削除時に連鎖削除されるのは notion_tokens / notification_settings のみ。
mappings / activity_log には ON DELETE 指定を付けていない。
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    TypeDecorator,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> str:
    return str(uuid.uuid4())


class UTCDateTime(TypeDecorator):
    """
    常に UTC の aware datetime として読み書きする DateTime 型。

    SQLite はタイムゾーンを保存しないため、書き込み時に UTC へ揃え、
    読み出し時に naive な値を UTC として扱う。
    """

    impl = DateTime
    cache_ok = True

    def __init__(self) -> None:
        super().__init__(timezone=True)

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Base(DeclarativeBase):
    pass


class ActivityKind(str, Enum):
    """activity_log.activity_type に入る値の一覧。"""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    TASK_CREATED = "task_created"
    TASK_UPDATED = "task_updated"
    DOC_CREATED = "doc_created"
    SEARCH = "search"
    MESSAGE_SAVED = "message_saved"


class CliqUser(Base):
    __tablename__ = "cliq_users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    cliq_user_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    cliq_display_name: Mapped[Optional[str]] = mapped_column(String(255))
    cliq_email: Mapped[Optional[str]] = mapped_column(String(255))
    connected_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=utcnow, nullable=False
    )


class NotionToken(Base):
    # 1 ユーザー 1 行は Storage.upsert_notion_token で保証する（UNIQUE 制約はなし）
    __tablename__ = "notion_tokens"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    cliq_user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("cliq_users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    access_token: Mapped[str] = mapped_column(Text, nullable=False)
    bot_id: Mapped[Optional[str]] = mapped_column(String(255))
    workspace_id: Mapped[Optional[str]] = mapped_column(String(255))
    workspace_name: Mapped[Optional[str]] = mapped_column(String(255))
    workspace_icon: Mapped[Optional[str]] = mapped_column(String(1024))
    owner: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON)
    duplicated_template_id: Mapped[Optional[str]] = mapped_column(String(255))
    expires_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime())
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=utcnow, nullable=False
    )


class Mapping(Base):
    __tablename__ = "mappings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    cliq_message_id: Mapped[Optional[str]] = mapped_column(String(255))
    cliq_channel_id: Mapped[Optional[str]] = mapped_column(String(255))
    notion_page_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    notion_page_url: Mapped[Optional[str]] = mapped_column(Text)
    cliq_user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("cliq_users.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=utcnow, nullable=False
    )


class NotificationSettings(Base):
    __tablename__ = "notification_settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    cliq_user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("cliq_users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    reminders_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    reminder_hours_before: Mapped[int] = mapped_column(Integer, default=24, nullable=False)
    notify_on_task_assigned: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notify_on_task_updated: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=utcnow, nullable=False
    )


class ActivityEntry(Base):
    # id は連番。created_at が同時刻になった場合の並び順の決め手にも使う
    __tablename__ = "activity_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cliq_user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("cliq_users.id"), nullable=False
    )
    activity_type: Mapped[ActivityKind] = mapped_column(
        SQLEnum(
            ActivityKind,
            name="activity_kind",
            native_enum=False,
            length=32,
            values_callable=lambda kinds: [k.value for k in kinds],
        ),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    notion_page_id: Mapped[Optional[str]] = mapped_column(String(255))
    notion_page_title: Mapped[Optional[str]] = mapped_column(Text)
    notion_page_url: Mapped[Optional[str]] = mapped_column(Text)
    # "metadata" は DeclarativeBase の予約属性なので属性名だけずらす
    metadata_: Mapped[Optional[Dict[str, Any]]] = mapped_column("metadata", JSON)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_activity_log_user_created", "cliq_user_id", "created_at"),
    )
