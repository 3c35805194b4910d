# backend/cliq_notion/connection/schemas.py

"""
接続状態まわりのスキーマ定義。
"""

from typing import Optional

from pydantic import BaseModel, Field

from cliq_notion.utils.schemas import CamelModel


class ConnectionStatus(CamelModel):
    """
    GET /api/connection/status のレスポンス。

    共有接続の情報をそのまま返す場合は bot_id も含まれる。
    """

    is_connected: bool = Field(..., description="Notion に接続済みかどうか")
    workspace_name: Optional[str] = None
    workspace_icon: Optional[str] = None
    bot_id: Optional[str] = None


class DisconnectResponse(BaseModel):
    success: bool = True
