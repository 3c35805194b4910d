# backend/tests/conftest.py
"""
Pytest configuration for Cliq Notion widget backend tests.

- Ensures that the project root (backend/) is added to sys.path
  so that `import cliq_notion.*` works correctly in tests.
- Ensures environment variables for tests are set with safe dummy values
  (in-memory SQLite, no global Notion connection).
- Provides a fresh in-memory Storage and a TestClient wired to it.
"""

import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest


def _ensure_project_root_in_sys_path() -> None:
    # This file is located at: backend/tests/conftest.py
    # parents[1] -> backend/
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)

    if project_root_str not in sys.path:
        sys.path.insert(0, project_root_str)


def _ensure_test_env_vars() -> None:
    """
    Set dummy environment variables required for tests.

    These values are only for local testing and do NOT contain real secrets.
    """
    os.environ["DATABASE_URL"] = "sqlite://"
    os.environ.pop("NOTION_GLOBAL_ACCESS_TOKEN", None)


_ensure_project_root_in_sys_path()
_ensure_test_env_vars()

from fastapi.testclient import TestClient  # noqa: E402

from cliq_notion.cliq.schemas import CliqMessage, CliqSendResult  # noqa: E402
from cliq_notion.cliq.service import CliqService  # noqa: E402
from cliq_notion.connection.schemas import ConnectionStatus  # noqa: E402
from cliq_notion.main import create_app  # noqa: E402
from cliq_notion.notion.schemas import NotionDocument, SearchResult  # noqa: E402
from cliq_notion.storage import CliqUser, NewCliqUser, Storage  # noqa: E402
from cliq_notion.storage.config import DatabaseConfig  # noqa: E402
from cliq_notion.storage.database import (  # noqa: E402
    create_engine_from_config,
    create_session_factory,
    init_db,
)


class RecordingCliqSender:
    """送信内容を記録するだけの Sender。"""

    def __init__(self) -> None:
        self.sent: List[Dict[str, object]] = []

    def send(
        self,
        message: CliqMessage,
        *,
        user_id: Optional[str] = None,
        channel_id: Optional[str] = None,
    ) -> CliqSendResult:
        self.sent.append({"message": message, "user_id": user_id, "channel_id": channel_id})
        return CliqSendResult(success=True, message_id=f"msg_test_{len(self.sent)}")


class StubGlobalSource:
    """共有接続のスタブ。access_token=None なら未接続。"""

    def __init__(
        self,
        access_token: Optional[str] = None,
        workspace_name: Optional[str] = "Shared Workspace",
        workspace_icon: Optional[str] = None,
        bot_id: Optional[str] = "bot-global",
    ) -> None:
        self._token = access_token
        self._workspace_name = workspace_name
        self._workspace_icon = workspace_icon
        self._bot_id = bot_id

    def describe(self) -> ConnectionStatus:
        if not self._token:
            return ConnectionStatus(is_connected=False)
        return ConnectionStatus(
            is_connected=True,
            workspace_name=self._workspace_name,
            workspace_icon=self._workspace_icon,
            bot_id=self._bot_id,
        )

    def access_token(self) -> Optional[str]:
        return self._token


class FakeNotionService:
    """NotionService の代わりに固定データを返すフェイク。"""

    def __init__(self, access_token: str) -> None:
        self.access_token = access_token
        self.created_pages: List[Dict[str, str]] = []
        self.documents = [
            NotionDocument(
                id=f"page-{i}",
                title=f"Doc {i}",
                icon=None,
                last_edited_time="2024-01-01T00:00:00.000Z",
                url=f"https://notion.so/page-{i}",
            )
            for i in range(7)
        ]

    def get_recent_pages(self) -> List[NotionDocument]:
        return list(self.documents)

    def search_pages(self, query: str) -> List[SearchResult]:
        return [
            SearchResult(id=doc.id, title=doc.title, url=doc.url)
            for doc in self.documents
            if query.lower() in doc.title.lower()
        ]

    def create_page_from_text(self, title: str, content: str, *, parent_page_id=None) -> NotionDocument:
        self.created_pages.append({"title": title, "content": content})
        return NotionDocument(
            id="created-page-1",
            title=title,
            url="https://notion.so/created-page-1",
        )


@pytest.fixture()
def storage() -> Storage:
    """テストごとに新しいインメモリ DB を持つ Storage。"""
    engine = create_engine_from_config(DatabaseConfig(database_url="sqlite://"))
    init_db(engine)
    yield Storage(create_session_factory(engine))
    engine.dispose()


@pytest.fixture()
def user(storage: Storage) -> CliqUser:
    return storage.create_user(
        NewCliqUser(cliq_user_id="cliq-user-1", cliq_display_name="Alice")
    )


@pytest.fixture()
def cliq_sender() -> RecordingCliqSender:
    return RecordingCliqSender()


@pytest.fixture()
def global_source() -> StubGlobalSource:
    return StubGlobalSource()


@pytest.fixture()
def notion_services() -> List[FakeNotionService]:
    """ファクトリが生成した FakeNotionService の一覧（生成順）。"""
    return []


@pytest.fixture()
def client(storage, cliq_sender, global_source, notion_services) -> TestClient:
    def factory(access_token: str) -> FakeNotionService:
        service = FakeNotionService(access_token)
        notion_services.append(service)
        return service

    app = create_app(
        storage=storage,
        global_source=global_source,
        cliq_service=CliqService(cliq_sender),
        notion_service_factory=factory,
    )
    return TestClient(app)
