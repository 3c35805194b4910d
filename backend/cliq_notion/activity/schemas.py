# backend/cliq_notion/activity/schemas.py

"""
アクティビティフィードのスキーマ定義。
"""

from typing import Optional

from pydantic import Field

from cliq_notion.storage import ActivityEntry, ActivityKind
from cliq_notion.utils.schemas import CamelModel


class ActivityItem(CamelModel):
    """
    フィードの 1 件分。activity_log の 1 行をウィジェット向けに整形したもの。
    """

    id: str = Field(..., description="activity_log の ID")
    type: ActivityKind = Field(..., description="操作種別")
    description: str
    page_title: Optional[str] = None
    page_url: Optional[str] = None
    timestamp: str = Field(..., description="記録日時（ISO8601）")

    @classmethod
    def from_entry(cls, entry: ActivityEntry) -> "ActivityItem":
        return cls(
            id=str(entry.id),
            type=entry.activity_type,
            description=entry.description,
            page_title=entry.notion_page_title,
            page_url=entry.notion_page_url,
            timestamp=entry.created_at.isoformat(),
        )
