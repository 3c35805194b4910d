# backend/cliq_notion/notion/service.py

"""
Notion クライアントとウィジェット向けスキーマをつなぐサービス層。

- ページ検索 / 最近のページ一覧
- Notion API レスポンス → NotionDocument / SearchResult / NotionTask への変換
- チャットメッセージからのページ作成
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from .client import NotionClient
from .schemas import (
    NotionDocument,
    NotionTask,
    SearchResult,
    SearchResultType,
    TaskStatus,
)

SEARCH_PAGE_SIZE = 20
RECENT_PAGE_SIZE = 10
MAX_TASKS = 5

_TASK_STATUS_CYCLE = (TaskStatus.IN_PROGRESS, TaskStatus.TODO, TaskStatus.DONE)


def _extract_title_text(prop: Dict[str, Any]) -> Optional[str]:
    """
    Notion の title プロパティからプレーンテキストを抽出する。
    text.content / plain_text のどちらが入っていても拾えるようにしている。
    """
    if not isinstance(prop, dict):
        return None

    title = prop.get("title")
    if not isinstance(title, list) or not title:
        return None

    first = title[0]
    if not isinstance(first, dict):
        return None

    text = first.get("text")
    if isinstance(text, dict) and isinstance(text.get("content"), str):
        return text["content"]

    plain = first.get("plain_text")
    if isinstance(plain, str):
        return plain

    return None


def extract_page_title(page: Dict[str, Any]) -> str:
    """
    ページのタイトルを取り出す。

    通常ページは "title"、データベース配下のページは "Name" プロパティに入っていることが多い。
    """
    properties: Dict[str, Any] = page.get("properties") or {}
    for key in ("title", "Name"):
        text = _extract_title_text(properties.get(key, {}))
        if text:
            return text
    return "Untitled"


def extract_page_icon(page: Dict[str, Any]) -> Optional[str]:
    """
    ページアイコンを取り出す（絵文字優先、なければ外部画像 URL）。
    """
    icon = page.get("icon")
    if not isinstance(icon, dict):
        return None

    emoji = icon.get("emoji")
    if isinstance(emoji, str):
        return emoji

    external = icon.get("external")
    if isinstance(external, dict) and isinstance(external.get("url"), str):
        return external["url"]

    return None


def to_search_result(page: Dict[str, Any]) -> SearchResult:
    parent = page.get("parent") or {}
    return SearchResult(
        id=page.get("id", ""),
        title=extract_page_title(page),
        type=(
            SearchResultType.DATABASE
            if page.get("object") == "database"
            else SearchResultType.PAGE
        ),
        icon=extract_page_icon(page),
        url=page.get("url", ""),
        parent="In a database" if parent.get("database_id") else None,
    )


def to_document(page: Dict[str, Any]) -> NotionDocument:
    return NotionDocument(
        id=page.get("id", ""),
        title=extract_page_title(page),
        icon=extract_page_icon(page),
        last_edited_time=page.get("last_edited_time"),
        url=page.get("url", ""),
    )


def derive_tasks(
    documents: List[NotionDocument],
    *,
    assignee: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[NotionTask]:
    """
    最近のページ一覧をタスク一覧として見せるための変換。

    - 先頭 MAX_TASKS 件のみ
    - ステータスは In Progress → To Do → Done の順に割り当てる
    - 先頭 3 件には 1 日後 / 2 日後 / 3 日後の期日を付ける
    - 偶数番目には担当者（リクエストしたユーザー）を付ける
    """
    now = now or datetime.now(timezone.utc)
    tasks: List[NotionTask] = []

    for idx, doc in enumerate(documents[:MAX_TASKS]):
        tasks.append(
            NotionTask(
                id=doc.id,
                title=doc.title,
                status=_TASK_STATUS_CYCLE[idx % len(_TASK_STATUS_CYCLE)],
                due_date=now + timedelta(days=idx + 1) if idx < 3 else None,
                assignee=assignee if idx % 2 == 0 else None,
                url=doc.url,
            )
        )

    return tasks


class NotionService:
    """
    NotionClient を利用して、ルーター層に対して扱いやすいモデルを返すサービス。
    """

    def __init__(self, client: NotionClient) -> None:
        self.client = client

    def search_pages(self, query: str) -> List[SearchResult]:
        """キーワードに一致するページを最大 SEARCH_PAGE_SIZE 件返す。"""
        raw_pages = self.client.search(query, page_size=SEARCH_PAGE_SIZE)
        return [to_search_result(page) for page in raw_pages]

    def get_recent_pages(self) -> List[NotionDocument]:
        """最終更新日時の新しい順にページを RECENT_PAGE_SIZE 件返す。"""
        raw_pages = self.client.search(
            sort_by_last_edited=True,
            page_size=RECENT_PAGE_SIZE,
        )
        return [to_document(page) for page in raw_pages]

    def create_page_from_text(
        self,
        title: str,
        content: str,
        *,
        parent_page_id: Optional[str] = None,
    ) -> NotionDocument:
        """
        テキストを本文に持つページを作成し、作成結果を NotionDocument で返す。
        """
        page = self.client.create_page(
            title,
            content=content,
            parent_page_id=parent_page_id,
        )
        return NotionDocument(
            id=page.get("id", ""),
            title=title,
            icon=None,
            last_edited_time=page.get("last_edited_time"),
            url=page.get("url", ""),
        )
