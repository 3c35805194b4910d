# backend/cliq_notion/cliq/service.py

"""
Cliq への送信インターフェースと最小実装。

現時点のスコープでは:
- CliqMessage を受け取る send() インターフェース
- ログ出力のみ行う LoggingCliqSender
- リマインダー / タスク割り当て / タスク更新の通知文を組み立てる CliqService
- スラッシュコマンド応答の整形 format_slash_command_response()

を提供し、Cliq Bot API への実送信は Sender 実装の追加で対応する。
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Protocol

from .schemas import (
    CardTheme,
    CliqButton,
    CliqButtonAction,
    CliqCard,
    CliqMessage,
    CliqSendResult,
    ResponseKind,
)

logger = logging.getLogger(__name__)

_RESPONSE_ICONS = {
    ResponseKind.SUCCESS: "✅",
    ResponseKind.ERROR: "❌",
    ResponseKind.INFO: "ℹ️",
}


class CliqSender(Protocol):
    """
    Cliq 送信の最小インターフェース。

    実装例:
    - LoggingCliqSender: ログ出力のみ
    - Bot API 経由で送信する Sender（将来）
    """

    def send(
        self,
        message: CliqMessage,
        *,
        user_id: Optional[str] = None,
        channel_id: Optional[str] = None,
    ) -> CliqSendResult:  # pragma: no cover - Protocol
        ...


class LoggingCliqSender:
    """
    CliqMessage を Python の logger に記録するだけの Sender。

    - 外部サービスへの送信は行わない
    - message_id は送信時刻（ミリ秒）から組み立てる
    """

    def __init__(self, logger_: logging.Logger | None = None) -> None:
        self._logger = logger_ or logger

    def send(
        self,
        message: CliqMessage,
        *,
        user_id: Optional[str] = None,
        channel_id: Optional[str] = None,
    ) -> CliqSendResult:
        target = f"channel={channel_id}" if channel_id else f"user={user_id}"
        self._logger.info(
            "Sending Cliq message [%s] %s",
            target,
            message.model_dump_json(exclude_none=True),
        )
        return CliqSendResult(
            success=True,
            message_id=f"msg_{int(time.time() * 1000)}",
        )


def _open_url_button(label: str, url: str) -> CliqButton:
    return CliqButton(
        label=label,
        type="open.url",
        action=CliqButtonAction(type="open.url", data={"url": url}),
    )


def format_slash_command_response(
    kind: ResponseKind,
    title: str,
    description: str,
    *,
    action_url: Optional[str] = None,
    action_label: Optional[str] = None,
) -> CliqMessage:
    """
    スラッシュコマンド / メッセージアクションの応答メッセージを組み立てる。

    action_url と action_label が両方ある場合のみボタンを付ける。
    """
    heading = f"{_RESPONSE_ICONS[kind]} {title}"
    message = CliqMessage(
        text=heading,
        card=CliqCard(
            title=heading,
            description=description,
            theme=CardTheme.MODERN_INLINE,
        ),
    )
    if action_url and action_label:
        message.buttons = [_open_url_button(action_label, action_url)]
    return message


class CliqService:
    """
    通知メッセージを組み立てて Sender に渡すサービス。

    Sender 側の例外はそのまま呼び出し元に送出する。
    """

    def __init__(self, sender: CliqSender) -> None:
        self._sender = sender

    def send_message(
        self,
        message: CliqMessage,
        *,
        user_id: Optional[str] = None,
        channel_id: Optional[str] = None,
    ) -> CliqSendResult:
        return self._sender.send(message, user_id=user_id, channel_id=channel_id)

    def send_task_reminder(
        self,
        *,
        user_id: str,
        task_title: str,
        task_url: str,
        due_date: str,
    ) -> CliqSendResult:
        message = CliqMessage(
            text=f'Reminder: Task "{task_title}" is due {due_date}',
            card=CliqCard(
                title="📋 Task Reminder",
                description=f"**{task_title}**\n\nDue: {due_date}",
                theme=CardTheme.MODERN_INLINE,
            ),
            buttons=[_open_url_button("View in Notion", task_url)],
        )
        return self.send_message(message, user_id=user_id)

    def send_task_assigned(
        self,
        *,
        user_id: str,
        task_title: str,
        task_url: str,
        assigned_by: str,
    ) -> CliqSendResult:
        message = CliqMessage(
            text=f"{assigned_by} assigned you a task: {task_title}",
            card=CliqCard(
                title="✅ New Task Assigned",
                description=f"**{task_title}**\n\nAssigned by: {assigned_by}",
                theme=CardTheme.MODERN_INLINE,
            ),
            buttons=[_open_url_button("View Task", task_url)],
        )
        return self.send_message(message, user_id=user_id)

    def send_task_updated(
        self,
        *,
        user_id: str,
        task_title: str,
        task_url: str,
        changes: str,
    ) -> CliqSendResult:
        message = CliqMessage(
            text=f"Task updated: {task_title}",
            card=CliqCard(
                title="🔄 Task Updated",
                description=f"**{task_title}**\n\n{changes}",
                theme=CardTheme.MODERN_INLINE,
            ),
            buttons=[_open_url_button("View Task", task_url)],
        )
        return self.send_message(message, user_id=user_id)
