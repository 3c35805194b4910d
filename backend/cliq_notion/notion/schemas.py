# backend/cliq_notion/notion/schemas.py

"""
Notion から取得したデータをウィジェットで扱うためのスキーマ定義。
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from cliq_notion.utils.schemas import CamelModel


class NotionDocument(CamelModel):
    """
    「最近のドキュメント」タブの 1 件分。
    """

    id: str = Field(..., description="Notion ページ ID")
    title: str = Field(..., description="ページタイトル（取れなければ Untitled）")
    icon: Optional[str] = Field(None, description="絵文字 or 外部画像 URL")
    last_edited_time: Optional[str] = Field(None, description="最終更新日時（ISO8601）")
    url: str = Field(..., description="ページ URL")


class SearchResultType(str, Enum):
    PAGE = "page"
    DATABASE = "database"


class SearchResult(CamelModel):
    """
    検索タブの 1 件分。
    """

    id: str
    title: str
    type: SearchResultType = SearchResultType.PAGE
    icon: Optional[str] = None
    url: str
    parent: Optional[str] = Field(
        None,
        description="データベース配下のページなら 'In a database'",
    )


class TaskStatus(str, Enum):
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"


class NotionTask(CamelModel):
    """
    タスクタブの 1 件分。

    Notion 上のタスク DB はモデリングしておらず、最近のページをタスクとして見せている。
    """

    id: str
    title: str
    status: TaskStatus
    due_date: Optional[datetime] = None
    assignee: Optional[str] = None
    url: str
    properties: Dict[str, Any] = Field(default_factory=dict)


class TaskStatusUpdate(BaseModel):
    """PATCH /api/tasks/{id} のリクエストボディ。"""

    status: str = Field(..., min_length=1, description="新しいステータス")


class TaskStatusUpdateResponse(BaseModel):
    success: bool = True
    id: str
    status: str


class NotionWebhookEvent(BaseModel):
    """
    POST /api/notion/webhook のリクエストボディ。
    """

    page_id: str = Field(..., description="イベント対象の Notion ページ ID")
    action: str = Field(..., description="created / updated など")
    properties: Optional[Dict[str, Any]] = Field(
        None,
        description="ページのプロパティ（title があれば通知文に使う）",
    )


class WebhookAck(BaseModel):
    success: bool = True
