# backend/cliq_notion/automation/reminders.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from cliq_notion.cliq.factory import build_cliq_service
from cliq_notion.cliq.schemas import CliqSendResult
from cliq_notion.cliq.service import CliqService

logger = logging.getLogger(__name__)

TEST_TASK_TITLE = "Test Task"
TEST_TASK_URL = "https://notion.so/test-task"


def _normalize_now(now: Optional[datetime]) -> datetime:
    """
    naive な datetime が渡された場合でも UTC として扱うヘルパー。
    """
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def run_reminder_check(*, now: Optional[datetime] = None) -> datetime:
    """
    1 時間ごとのタスクリマインダーチェック。

    現時点では処理の入口だけを用意しており、実際の通知は行わない。
    本実装では:
    - Notion から 24 時間以内に期限が来るタスクを取得
    - 各ユーザーの通知設定（reminders_enabled / reminder_hours_before）を確認
    - 対象ユーザーに CliqService.send_task_reminder で通知
    を行う想定。

    :return: チェックを実行した時刻（UTC）
    """
    checked_at = _normalize_now(now)
    logger.info("Checking for task reminders (at %s)...", checked_at.isoformat())
    logger.info("Task reminder check completed.")
    return checked_at


def send_test_reminder(
    cliq_user_id: str,
    *,
    cliq_service: Optional[CliqService] = None,
) -> CliqSendResult:
    """
    動作確認用に、固定内容のリマインダーを 1 件送る。
    """
    cliq_service = cliq_service or build_cliq_service()
    return cliq_service.send_task_reminder(
        user_id=cliq_user_id,
        task_title=TEST_TASK_TITLE,
        task_url=TEST_TASK_URL,
        due_date="today",
    )


def main(argv: Optional[list[str]] = None) -> None:
    """
    簡易 CLI エントリーポイント。

    例:
        python -m cliq_notion.automation.reminders check
        python -m cliq_notion.automation.reminders test-reminder --user demo-user-001

    本番運用では crontab の "0 * * * *" から check を呼び出す想定。
    """
    import argparse

    parser = argparse.ArgumentParser(description="Task reminder jobs runner")
    subparsers = parser.add_subparsers(dest="job", required=True)
    subparsers.add_parser("check", help="リマインダー対象タスクのチェック")
    test_parser = subparsers.add_parser("test-reminder", help="テスト用リマインダーの送信")
    test_parser.add_argument("--user", required=True, help="送信先の Cliq ユーザー ID")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    if args.job == "check":
        run_reminder_check()
    elif args.job == "test-reminder":
        result = send_test_reminder(args.user)
        logger.info("Test reminder sent: %s", result.message_id)


if __name__ == "__main__":
    main()
