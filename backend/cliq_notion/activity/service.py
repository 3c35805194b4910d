# backend/cliq_notion/activity/service.py

"""
操作履歴の記録用サービス。

接続 / 切断 / 検索 / タスク更新などの操作を、同じ形（種別・説明・ページ情報・補足情報）で
activity_log に追記する。重複排除や保持期間の管理は行わない。
"""

import logging
from typing import Any, Dict, List, Optional

from cliq_notion.storage import (
    DEFAULT_ACTIVITY_LIMIT,
    ActivityEntry,
    ActivityKind,
    NewActivity,
    Storage,
)

logger = logging.getLogger(__name__)


class ActivityLogger:
    """
    Storage の activity_log 操作を包む薄いラッパー。
    """

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    def log(
        self,
        user_id: str,
        kind: ActivityKind,
        description: str,
        *,
        page_id: Optional[str] = None,
        page_title: Optional[str] = None,
        page_url: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ActivityEntry:
        """
        操作を 1 件記録し、採番済みの行を返す。
        """
        entry = self._storage.create_activity(
            NewActivity(
                cliq_user_id=user_id,
                activity_type=kind,
                description=description,
                notion_page_id=page_id,
                notion_page_title=page_title,
                notion_page_url=page_url,
                metadata=metadata,
            )
        )
        logger.debug("Recorded %s activity for user %s.", kind.value, user_id)
        return entry

    def recent(self, user_id: str, limit: int = DEFAULT_ACTIVITY_LIMIT) -> List[ActivityEntry]:
        """新しい順に最大 limit 件を返す。"""
        return self._storage.get_activity_by_user_id(user_id, limit=limit)
