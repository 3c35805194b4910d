# backend/tests/test_notion_router.py

from cliq_notion.cliq.service import CliqService
from cliq_notion.notion.client import NotionAuthError
from cliq_notion.storage import ActivityKind, NewMapping, NewNotionToken, SettingsUpdate

HEADERS = {"X-Cliq-User-Id": "cliq-user-1", "X-Cliq-Display-Name": "Alice"}


def _connect(storage, user, token: str = "user-token") -> None:
    storage.upsert_notion_token(NewNotionToken(cliq_user_id=user.id, access_token=token))


class _FailingNotionService:
    def get_recent_pages(self):
        raise NotionAuthError("Unauthorized. The Notion token is invalid or revoked.")

    def search_pages(self, query):
        raise NotionAuthError("Unauthorized. The Notion token is invalid or revoked.")


def test_tasks_empty_when_not_connected(client, user, notion_services) -> None:
    response = client.get("/api/tasks", headers=HEADERS)

    assert response.status_code == 200
    assert response.json() == []
    assert notion_services == []


def test_tasks_derived_from_recent_pages(client, storage, user, notion_services) -> None:
    _connect(storage, user)

    response = client.get("/api/tasks", headers=HEADERS)

    assert response.status_code == 200
    tasks = response.json()
    assert len(tasks) == 5
    assert tasks[0]["id"] == "page-0"
    assert tasks[0]["status"] == "In Progress"
    assert tasks[0]["assignee"] == "Alice"
    assert tasks[0]["dueDate"] is not None
    assert tasks[1]["assignee"] is None
    assert tasks[4]["dueDate"] is None
    assert notion_services[0].access_token == "user-token"


def test_docs_returns_recent_pages(client, storage, user) -> None:
    _connect(storage, user)

    response = client.get("/api/docs", headers=HEADERS)

    assert response.status_code == 200
    docs = response.json()
    assert len(docs) == 7
    assert docs[0]["lastEditedTime"] == "2024-01-01T00:00:00.000Z"
    assert docs[0]["url"] == "https://notion.so/page-0"


def test_docs_notion_failure_is_500(client, storage, user) -> None:
    _connect(storage, user)
    client.app.state.notion_service_factory = lambda token: _FailingNotionService()

    response = client.get("/api/docs", headers=HEADERS)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to fetch documents from Notion."


def test_search_short_query_returns_empty_without_activity(client, storage, user) -> None:
    _connect(storage, user)

    for params in ({}, {"query": "D"}):
        response = client.get("/api/search", params=params, headers=HEADERS)
        assert response.status_code == 200
        assert response.json() == []

    assert storage.get_activity_by_user_id(user.id) == []


def test_search_not_connected_returns_empty(client, storage, user) -> None:
    response = client.get("/api/search", params={"query": "Doc"}, headers=HEADERS)

    assert response.status_code == 200
    assert response.json() == []
    assert storage.get_activity_by_user_id(user.id) == []


def test_search_logs_activity(client, storage, user) -> None:
    _connect(storage, user)

    response = client.get("/api/search", params={"query": "Doc 3"}, headers=HEADERS)

    assert response.status_code == 200
    [result] = response.json()
    assert result["id"] == "page-3"
    assert result["type"] == "page"

    [entry] = storage.get_activity_by_user_id(user.id)
    assert entry.activity_type is ActivityKind.SEARCH
    assert entry.description == 'Searched for "Doc 3"'
    assert entry.metadata_ == {"query": "Doc 3", "result_count": 1}


def test_search_notion_failure_is_500(client, storage, user) -> None:
    _connect(storage, user)
    client.app.state.notion_service_factory = lambda token: _FailingNotionService()

    response = client.get("/api/search", params={"query": "Doc"}, headers=HEADERS)

    assert response.status_code == 500
    assert storage.get_activity_by_user_id(user.id) == []


def test_update_task_status_records_activity(client, storage, user) -> None:
    response = client.patch("/api/tasks/page-2", json={"status": "Done"}, headers=HEADERS)

    assert response.status_code == 200
    assert response.json() == {"success": True, "id": "page-2", "status": "Done"}

    [entry] = storage.get_activity_by_user_id(user.id)
    assert entry.activity_type is ActivityKind.TASK_UPDATED
    assert entry.notion_page_id == "page-2"
    assert entry.metadata_ == {"status": "Done"}


def test_update_task_status_requires_status(client, user) -> None:
    response = client.patch("/api/tasks/page-2", json={}, headers=HEADERS)
    assert response.status_code == 422


def test_requests_without_headers_use_default_identity(client, storage) -> None:
    response = client.get("/api/tasks")

    assert response.status_code == 200
    created = storage.get_user_by_cliq_user_id("demo-user-001")
    assert created is not None
    assert created.cliq_display_name == "Demo User"


# ---- Webhook ---------------------------------------------------------------


def _map_page(storage, user, page_id: str = "page-123", url: str = "https://notion.so/page-123"):
    return storage.create_mapping(
        NewMapping(cliq_user_id=user.id, notion_page_id=page_id, notion_page_url=url)
    )


def test_webhook_for_unmapped_page_is_acknowledged(client, cliq_sender) -> None:
    response = client.post(
        "/api/notion/webhook",
        json={"page_id": "page-unmapped", "action": "updated"},
    )

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert cliq_sender.sent == []


def test_webhook_update_notifies_mapped_user(client, storage, user, cliq_sender) -> None:
    _map_page(storage, user)

    response = client.post(
        "/api/notion/webhook",
        json={"page_id": "page-123", "action": "updated", "properties": {"title": "Roadmap"}},
    )

    assert response.status_code == 200
    [sent] = cliq_sender.sent
    assert sent["user_id"] == "cliq-user-1"
    message = sent["message"]
    assert message.text == "Task updated: Roadmap"
    assert message.card.description == "**Roadmap**\n\nTask has been updated"
    assert message.buttons[0].action.data == {"url": "https://notion.so/page-123"}


def test_webhook_falls_back_to_generic_title_and_url(client, storage, user, cliq_sender) -> None:
    _map_page(storage, user, page_id="page-9", url=None)

    client.post("/api/notion/webhook", json={"page_id": "page-9", "action": "updated"})

    [sent] = cliq_sender.sent
    assert sent["message"].text == "Task updated: Task"
    assert sent["message"].buttons[0].action.data == {"url": "https://notion.so/page-9"}


def test_webhook_ignores_other_actions(client, storage, user, cliq_sender) -> None:
    _map_page(storage, user)

    response = client.post(
        "/api/notion/webhook",
        json={"page_id": "page-123", "action": "created"},
    )

    assert response.status_code == 200
    assert cliq_sender.sent == []


def test_webhook_respects_update_notification_setting(client, storage, user, cliq_sender) -> None:
    _map_page(storage, user)
    storage.upsert_notification_settings(
        SettingsUpdate(cliq_user_id=user.id, notify_on_task_updated=False)
    )

    response = client.post(
        "/api/notion/webhook",
        json={"page_id": "page-123", "action": "updated"},
    )

    assert response.status_code == 200
    assert cliq_sender.sent == []


def test_webhook_sender_failure_is_500(client, storage, user) -> None:
    _map_page(storage, user)

    class _ExplodingSender:
        def send(self, message, *, user_id=None, channel_id=None):
            raise RuntimeError("cliq down")

    client.app.state.cliq_service = CliqService(_ExplodingSender())

    response = client.post(
        "/api/notion/webhook",
        json={"page_id": "page-123", "action": "updated"},
    )

    assert response.status_code == 500
