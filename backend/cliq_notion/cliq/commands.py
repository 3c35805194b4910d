# backend/cliq_notion/cliq/commands.py

"""
/notion スラッシュコマンドの解釈。

対応コマンド:
- /notion connect
- /notion task add <title> --due YYYY-MM-DD
- /notion search <query>
それ以外はヘルプを返す。
"""

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from .schemas import CliqMessage, ResponseKind
from .service import format_slash_command_response

CONNECT_PATH = "/api/auth/notion/start"

HELP_TEXT = (
    "• /notion connect - Connect your Notion account\n"
    "• /notion task add <title> --due YYYY-MM-DD - Create a task\n"
    "• /notion search <query> - Search your workspace"
)

_DUE_PATTERN = re.compile(r"--due\s+([\d-]+)")


@dataclass(frozen=True)
class TaskDraft:
    title: str
    due_date: Optional[str] = None


def parse_task_add(rest: str) -> TaskDraft:
    """
    "task add" 以降の文字列からタイトルと期日を取り出す。

    >>> parse_task_add("Write report --due 2024-05-01")
    TaskDraft(title='Write report', due_date='2024-05-01')
    """
    match = _DUE_PATTERN.search(rest)
    title = _DUE_PATTERN.sub("", rest).strip()
    return TaskDraft(title=title, due_date=match.group(1) if match else None)


def handle_slash_command(text: str) -> CliqMessage:
    """
    コマンド文字列を解釈して応答メッセージを返す。
    """
    parts = text.split()
    subcommand = parts[0] if parts else ""

    if subcommand == "connect":
        return format_slash_command_response(
            ResponseKind.INFO,
            "Connect Notion",
            "Click the button below to connect your Notion workspace",
            action_url=CONNECT_PATH,
            action_label="Connect Notion",
        )

    if subcommand == "task" and len(parts) > 1 and parts[1] == "add":
        draft = parse_task_add(" ".join(parts[2:]))
        description = f'Created task: "{draft.title}"'
        if draft.due_date:
            description += f"\nDue: {draft.due_date}"
        # Notion 側のタスク DB は扱わないため、作成結果は固定のリンクを返す
        return format_slash_command_response(
            ResponseKind.SUCCESS,
            "Task Created",
            description,
            action_url="https://notion.so/demo-task",
            action_label="View in Notion",
        )

    if subcommand == "search":
        query = " ".join(parts[1:])
        return format_slash_command_response(
            ResponseKind.INFO,
            "Search Notion",
            f'Searching for: "{query}"',
            action_url=f"/?tab=search&q={quote(query, safe='')}",
            action_label="View Results",
        )

    return format_slash_command_response(
        ResponseKind.INFO,
        "Available Commands",
        HELP_TEXT,
    )
