# backend/tests/test_notion_service.py

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from cliq_notion.notion.schemas import NotionDocument, SearchResultType, TaskStatus
from cliq_notion.notion.service import (
    NotionService,
    derive_tasks,
    extract_page_icon,
    extract_page_title,
    to_search_result,
)


def _page(**overrides) -> Dict[str, Any]:
    page: Dict[str, Any] = {
        "object": "page",
        "id": "page-1",
        "url": "https://notion.so/page-1",
        "last_edited_time": "2024-05-01T00:00:00.000Z",
        "properties": {
            "title": {"title": [{"text": {"content": "Roadmap"}, "plain_text": "Roadmap"}]},
        },
    }
    page.update(overrides)
    return page


def test_extract_page_title_variants() -> None:
    assert extract_page_title(_page()) == "Roadmap"

    db_row = _page(properties={"Name": {"title": [{"plain_text": "Row title"}]}})
    assert extract_page_title(db_row) == "Row title"

    assert extract_page_title(_page(properties={})) == "Untitled"
    assert extract_page_title(_page(properties={"title": {"title": []}})) == "Untitled"


def test_extract_page_icon_variants() -> None:
    assert extract_page_icon(_page(icon={"type": "emoji", "emoji": "📄"})) == "📄"
    assert (
        extract_page_icon(_page(icon={"type": "external", "external": {"url": "https://x/i.png"}}))
        == "https://x/i.png"
    )
    assert extract_page_icon(_page(icon=None)) is None


def test_to_search_result_marks_database_children() -> None:
    result = to_search_result(_page(parent={"type": "database_id", "database_id": "db-1"}))

    assert result.type is SearchResultType.PAGE
    assert result.parent == "In a database"

    database = to_search_result(_page(object="database", parent={"type": "workspace"}))
    assert database.type is SearchResultType.DATABASE
    assert database.parent is None


def _docs(n: int) -> List[NotionDocument]:
    return [
        NotionDocument(id=f"d{i}", title=f"Doc {i}", url=f"https://notion.so/d{i}")
        for i in range(n)
    ]


def test_derive_tasks_assigns_status_due_date_and_assignee() -> None:
    now = datetime(2024, 5, 1, tzinfo=timezone.utc)

    tasks = derive_tasks(_docs(7), assignee="Alice", now=now)

    assert [t.id for t in tasks] == ["d0", "d1", "d2", "d3", "d4"]
    assert [t.status for t in tasks] == [
        TaskStatus.IN_PROGRESS,
        TaskStatus.TODO,
        TaskStatus.DONE,
        TaskStatus.IN_PROGRESS,
        TaskStatus.TODO,
    ]
    assert [t.due_date for t in tasks] == [
        now + timedelta(days=1),
        now + timedelta(days=2),
        now + timedelta(days=3),
        None,
        None,
    ]
    assert [t.assignee for t in tasks] == ["Alice", None, "Alice", None, "Alice"]


def test_derive_tasks_empty() -> None:
    assert derive_tasks([]) == []


class _FakeClient:
    def __init__(self, pages: List[Dict[str, Any]]) -> None:
        self.pages = pages
        self.search_calls: List[Dict[str, Any]] = []
        self.created: List[Dict[str, Any]] = []

    def search(self, query=None, *, sort_by_last_edited=False, page_size=20):
        self.search_calls.append(
            {"query": query, "sort_by_last_edited": sort_by_last_edited, "page_size": page_size}
        )
        return self.pages

    def create_page(self, title, *, content=None, parent_page_id=None):
        self.created.append({"title": title, "content": content, "parent_page_id": parent_page_id})
        return {"id": "new-page", "url": "https://notion.so/new-page"}


def test_service_search_and_recent_pages() -> None:
    client = _FakeClient([_page(icon={"emoji": "🗺️"})])
    service = NotionService(client)

    [result] = service.search_pages("road")
    [doc] = service.get_recent_pages()

    assert result.title == "Roadmap"
    assert doc.icon == "🗺️"
    assert doc.last_edited_time == "2024-05-01T00:00:00.000Z"
    assert client.search_calls == [
        {"query": "road", "sort_by_last_edited": False, "page_size": 20},
        {"query": None, "sort_by_last_edited": True, "page_size": 10},
    ]


def test_service_create_page_from_text() -> None:
    client = _FakeClient([])
    service = NotionService(client)

    doc = service.create_page_from_text("Message from Cliq", "hello")

    assert doc.id == "new-page"
    assert doc.title == "Message from Cliq"
    assert doc.url == "https://notion.so/new-page"
    assert client.created == [
        {"title": "Message from Cliq", "content": "hello", "parent_page_id": None}
    ]
