# backend/cliq_notion/cliq/schemas.py

"""
Cliq メッセージのスキーマ定義。

Cliq のメッセージカード形式（text + card + buttons）に合わせている。
※ トークンなどの機密情報はメッセージに含めないこと。
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CardTheme(str, Enum):
    MODERN_INLINE = "modern-inline"
    POLL = "poll"
    PROMPT = "prompt"


class ResponseKind(str, Enum):
    """スラッシュコマンド応答の種類（先頭アイコンが変わる）。"""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class CliqCard(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    theme: Optional[CardTheme] = None


class CliqBot(BaseModel):
    name: Optional[str] = None
    image: Optional[str] = None


class CliqButtonAction(BaseModel):
    type: str = Field(..., description="open.url など")
    data: Dict[str, Any] = Field(default_factory=dict)


class CliqButton(BaseModel):
    label: str
    type: Optional[str] = None
    action: Optional[CliqButtonAction] = None


class CliqMessage(BaseModel):
    """
    Cliq に送る / 返すメッセージ 1 件分。
    """

    text: str = Field(..., description="通知一覧などに出るプレーンテキスト")
    card: Optional[CliqCard] = None
    bot: Optional[CliqBot] = None
    buttons: Optional[List[CliqButton]] = None


class CliqSendResult(BaseModel):
    success: bool
    message_id: Optional[str] = None


class SlashCommandRequest(BaseModel):
    """POST /api/cliq/slash のリクエストボディ（Cliq から渡される値）。"""

    text: str = Field("", description="コマンド名以降の文字列")
    user_id: Optional[str] = None
    channel_id: Optional[str] = None


class MessageActionRequest(BaseModel):
    """POST /api/cliq/message-action のリクエストボディ。"""

    message_text: str = Field(..., description="保存対象のメッセージ本文")
    message_id: Optional[str] = None
    channel_id: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
