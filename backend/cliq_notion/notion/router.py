# backend/cliq_notion/notion/router.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from cliq_notion.activity.service import ActivityLogger
from cliq_notion.cliq.service import CliqService
from cliq_notion.dependencies import (
    NotionServiceFactory,
    get_activity_logger,
    get_cliq_service,
    get_current_user,
    get_notion_service_factory,
    get_storage,
)
from cliq_notion.storage import ActivityKind, CliqUser, Storage, StorageError

from .client import NotionClientError
from .schemas import (
    NotionDocument,
    NotionTask,
    NotionWebhookEvent,
    SearchResult,
    TaskStatusUpdate,
    TaskStatusUpdateResponse,
    WebhookAck,
)
from .service import NotionService, derive_tasks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["notion"])

MIN_QUERY_LENGTH = 2


def _notion_service_for(
    user: CliqUser,
    storage: Storage,
    factory: NotionServiceFactory,
) -> Optional[NotionService]:
    """ユーザーのトークンで NotionService を作る。未接続なら None。"""
    token = storage.get_notion_token(user.id)
    if token is None:
        return None
    return factory(token.access_token)


def _internal_error(detail: str, exc: Exception) -> HTTPException:
    logger.error("%s %s", detail, exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
    )


@router.get(
    "/tasks",
    response_model=List[NotionTask],
    summary="タスク一覧",
    description="最近のページをタスクとして返す。未接続の場合は空配列。",
)
def list_tasks(
    user: CliqUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    factory: NotionServiceFactory = Depends(get_notion_service_factory),
) -> List[NotionTask]:
    try:
        service = _notion_service_for(user, storage, factory)
        if service is None:
            return []
        documents = service.get_recent_pages()
    except (StorageError, NotionClientError) as exc:
        raise _internal_error("Failed to fetch tasks from Notion.", exc) from exc

    return derive_tasks(documents, assignee=user.cliq_display_name)


@router.patch(
    "/tasks/{task_id}",
    response_model=TaskStatusUpdateResponse,
    summary="タスクのステータス更新",
)
def update_task_status(
    task_id: str,
    body: TaskStatusUpdate,
    user: CliqUser = Depends(get_current_user),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> TaskStatusUpdateResponse:
    """
    ステータス変更を操作履歴に記録する。

    Notion 側のタスク DB はモデリングしていないため、ページ自体は更新しない。
    """
    try:
        activity.log(
            user.id,
            ActivityKind.TASK_UPDATED,
            f"Updated task status to {body.status}",
            page_id=task_id,
            metadata={"status": body.status},
        )
    except StorageError as exc:
        raise _internal_error("Failed to record task update.", exc) from exc

    return TaskStatusUpdateResponse(success=True, id=task_id, status=body.status)


@router.get(
    "/docs",
    response_model=List[NotionDocument],
    summary="最近のドキュメント",
)
def list_recent_documents(
    user: CliqUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    factory: NotionServiceFactory = Depends(get_notion_service_factory),
) -> List[NotionDocument]:
    try:
        service = _notion_service_for(user, storage, factory)
        if service is None:
            return []
        return service.get_recent_pages()
    except (StorageError, NotionClientError) as exc:
        raise _internal_error("Failed to fetch documents from Notion.", exc) from exc


@router.get(
    "/search",
    response_model=List[SearchResult],
    summary="Notion ワークスペース検索",
)
def search_notion(
    query: Optional[str] = Query(None, description="検索キーワード（2 文字以上）"),
    user: CliqUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    factory: NotionServiceFactory = Depends(get_notion_service_factory),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> List[SearchResult]:
    """
    キーワード検索を行い、検索したことを操作履歴に残す。

    - キーワードが 2 文字未満 / 未接続の場合は空配列（履歴も残さない）
    """
    if not query or len(query) < MIN_QUERY_LENGTH:
        return []

    try:
        service = _notion_service_for(user, storage, factory)
        if service is None:
            return []
        results = service.search_pages(query)
        activity.log(
            user.id,
            ActivityKind.SEARCH,
            f'Searched for "{query}"',
            metadata={"query": query, "result_count": len(results)},
        )
    except (StorageError, NotionClientError) as exc:
        raise _internal_error("Failed to search Notion.", exc) from exc

    return results


@router.post(
    "/notion/webhook",
    response_model=WebhookAck,
    summary="Notion からの更新通知",
)
def receive_notion_webhook(
    event: NotionWebhookEvent,
    storage: Storage = Depends(get_storage),
    cliq: CliqService = Depends(get_cliq_service),
) -> WebhookAck:
    """
    ページ ID からマッピングを逆引きし、対応する Cliq ユーザーに通知する。

    - マッピングがないページのイベントは何もせず 200 を返す
    - action=updated かつ notify_on_task_updated が有効な場合のみ通知する
    """
    try:
        mapping = storage.get_mapping_by_notion_page_id(event.page_id)
        if mapping is None:
            return WebhookAck(success=True)

        user = storage.get_user(mapping.cliq_user_id)
        if user is None or event.action != "updated":
            return WebhookAck(success=True)

        settings = storage.get_notification_settings(user.id)
        if settings is not None and not settings.notify_on_task_updated:
            return WebhookAck(success=True)

        title = (event.properties or {}).get("title") or "Task"
        cliq.send_task_updated(
            user_id=user.cliq_user_id,
            task_title=str(title),
            task_url=mapping.notion_page_url or f"https://notion.so/{event.page_id}",
            changes="Task has been updated",
        )
    except Exception as exc:  # noqa: BLE001
        raise _internal_error("Failed to process Notion webhook.", exc) from exc

    return WebhookAck(success=True)
