# backend/cliq_notion/activity/router.py

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from cliq_notion.dependencies import get_activity_logger, get_current_user
from cliq_notion.storage import CliqUser, StorageError

from .schemas import ActivityItem
from .service import ActivityLogger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["activity"])

FEED_LIMIT = 20


@router.get(
    "/activity",
    response_model=List[ActivityItem],
    summary="アクティビティフィード",
    description="ユーザーの操作履歴を新しい順に最大 20 件返す。",
)
def get_activity_feed(
    user: CliqUser = Depends(get_current_user),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> List[ActivityItem]:
    try:
        entries = activity.recent(user.id, limit=FEED_LIMIT)
    except StorageError as exc:
        logger.exception("Failed to load activity feed for user %s.", user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load activity feed.",
        ) from exc

    return [ActivityItem.from_entry(entry) for entry in entries]
