# backend/tests/test_connection_service.py

import logging

from conftest import StubGlobalSource

from cliq_notion.activity.service import ActivityLogger
from cliq_notion.connection.provider import GlobalConnectionProvider
from cliq_notion.connection.schemas import ConnectionStatus
from cliq_notion.connection.service import ConnectionResolver, ConnectionService
from cliq_notion.notion.config import GlobalConnectionConfig
from cliq_notion.storage import ActivityKind, NewNotionToken


class _BrokenGlobalSource:
    def describe(self) -> ConnectionStatus:
        raise RuntimeError("global provider exploded")

    def access_token(self):
        raise RuntimeError("global provider exploded")


def test_resolver_prefers_user_token(storage, user) -> None:
    storage.upsert_notion_token(
        NewNotionToken(
            cliq_user_id=user.id,
            access_token="user-token",
            workspace_name="Team Space",
            workspace_icon="📘",
        )
    )
    resolver = ConnectionResolver(storage, _BrokenGlobalSource())

    status = resolver.resolve(user)

    assert status.is_connected is True
    assert status.workspace_name == "Team Space"
    assert status.workspace_icon == "📘"
    assert status.bot_id is None


def test_resolver_uses_default_name_for_unnamed_token(storage, user) -> None:
    storage.upsert_notion_token(NewNotionToken(cliq_user_id=user.id, access_token="t"))

    status = ConnectionResolver(storage, StubGlobalSource()).resolve(user)

    assert status.is_connected is True
    assert status.workspace_name == "Your Workspace"


def test_resolver_returns_global_status_verbatim(storage, user) -> None:
    source = StubGlobalSource(
        access_token="shared", workspace_name="Shared", workspace_icon="🌐", bot_id="bot-9"
    )

    status = ConnectionResolver(storage, source).resolve(user)

    assert status == source.describe()
    assert status.bot_id == "bot-9"


def test_resolver_reports_not_connected_when_global_fails(storage, user, caplog) -> None:
    resolver = ConnectionResolver(storage, _BrokenGlobalSource())

    with caplog.at_level(logging.WARNING, logger="cliq_notion.connection.service"):
        status = resolver.resolve(user)

    assert status.is_connected is False
    assert any("Global Notion connection lookup failed" in r.getMessage() for r in caplog.records)


def test_connect_with_global_stores_token_and_logs_activity(storage, user) -> None:
    source = StubGlobalSource(access_token="shared", workspace_name="Shared", bot_id="bot-g")
    service = ConnectionService(storage, source, ActivityLogger(storage))

    token = service.connect_with_global(user)

    assert token is not None
    stored = storage.get_notion_token(user.id)
    assert stored.access_token == "shared"
    assert stored.bot_id == "bot-g"
    assert stored.workspace_name == "Shared"

    [entry] = storage.get_activity_by_user_id(user.id)
    assert entry.activity_type is ActivityKind.CONNECTED
    assert entry.description == "Connected Notion workspace: Shared"


def test_connect_with_global_without_shared_connection_does_nothing(storage, user) -> None:
    service = ConnectionService(storage, StubGlobalSource(), ActivityLogger(storage))

    assert service.connect_with_global(user) is None
    assert storage.get_notion_token(user.id) is None
    assert storage.get_activity_by_user_id(user.id) == []


def test_disconnect_removes_token_and_logs_activity(storage, user) -> None:
    storage.upsert_notion_token(NewNotionToken(cliq_user_id=user.id, access_token="t"))
    service = ConnectionService(storage, StubGlobalSource(), ActivityLogger(storage))

    service.disconnect(user)
    # 2 回目もエラーにならない
    service.disconnect(user)

    assert storage.get_notion_token(user.id) is None
    kinds = [e.activity_type for e in storage.get_activity_by_user_id(user.id)]
    assert kinds == [ActivityKind.DISCONNECTED, ActivityKind.DISCONNECTED]


def test_global_provider_reads_config() -> None:
    provider = GlobalConnectionProvider(
        config_loader=lambda: GlobalConnectionConfig(
            access_token="shared",
            workspace_name=None,
            workspace_icon="🌐",
            bot_id="bot-env",
        )
    )

    status = provider.describe()

    assert status.is_connected is True
    assert status.workspace_name == "Connected Workspace"
    assert status.workspace_icon == "🌐"
    assert status.bot_id == "bot-env"
    assert provider.access_token() == "shared"


def test_global_provider_without_token_is_not_connected(monkeypatch) -> None:
    monkeypatch.delenv("NOTION_GLOBAL_ACCESS_TOKEN", raising=False)
    monkeypatch.setenv("NOTION_GLOBAL_WORKSPACE_NAME", "Ignored")

    provider = GlobalConnectionProvider()

    assert provider.describe() == ConnectionStatus(is_connected=False)
    assert provider.access_token() is None


def test_global_provider_picks_up_env_changes(monkeypatch) -> None:
    provider = GlobalConnectionProvider()

    monkeypatch.setenv("NOTION_GLOBAL_ACCESS_TOKEN", "from-env")
    monkeypatch.setenv("NOTION_GLOBAL_WORKSPACE_NAME", "Env Space")

    status = provider.describe()
    assert status.is_connected is True
    assert status.workspace_name == "Env Space"
