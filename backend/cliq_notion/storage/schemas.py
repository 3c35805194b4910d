# backend/cliq_notion/storage/schemas.py

"""
Storage への書き込み入力を表現するスキーマ定義。

id / created_at / updated_at などサーバ側で採番・付与する項目は含めない。
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, JsonValue

from .models import ActivityKind


class NewCliqUser(BaseModel):
    """cliq_users への登録内容。"""

    cliq_user_id: str = Field(..., min_length=1, description="Cliq 側のユーザー ID")
    cliq_display_name: Optional[str] = Field(None, description="表示名")
    cliq_email: Optional[str] = Field(None, description="メールアドレス")


class NewNotionToken(BaseModel):
    """
    notion_tokens の登録 / 置き換え内容。

    upsert 時は全項目で既存行を上書きする（未指定項目は None で上書き）。
    """

    cliq_user_id: str = Field(..., description="所有ユーザーの内部 ID")
    access_token: str = Field(..., min_length=1, description="Notion アクセストークン")
    bot_id: Optional[str] = None
    workspace_id: Optional[str] = None
    workspace_name: Optional[str] = None
    workspace_icon: Optional[str] = None
    owner: Optional[Dict[str, Any]] = None
    duplicated_template_id: Optional[str] = None
    expires_at: Optional[datetime] = None


class NewMapping(BaseModel):
    """mappings への登録内容。"""

    cliq_user_id: str = Field(..., description="所有ユーザーの内部 ID")
    notion_page_id: str = Field(..., min_length=1, description="Notion ページ ID")
    notion_page_url: Optional[str] = None
    cliq_message_id: Optional[str] = None
    cliq_channel_id: Optional[str] = None


class SettingsUpdate(BaseModel):
    """
    notification_settings の登録 / 更新内容。

    None の項目は「変更しない」扱い。新規作成時は列のデフォルト値が入る。
    """

    cliq_user_id: str = Field(..., description="所有ユーザーの内部 ID")
    reminders_enabled: Optional[bool] = None
    reminder_hours_before: Optional[int] = Field(None, ge=0)
    notify_on_task_assigned: Optional[bool] = None
    notify_on_task_updated: Optional[bool] = None

    def changes(self) -> Dict[str, Any]:
        """値が指定された項目だけを辞書で返す。"""
        return self.model_dump(exclude={"cliq_user_id"}, exclude_none=True)


class NewActivity(BaseModel):
    """activity_log への追記内容。"""

    cliq_user_id: str = Field(..., description="所有ユーザーの内部 ID")
    activity_type: ActivityKind = Field(..., description="操作種別")
    description: str = Field(..., description="人間向けの説明文")
    notion_page_id: Optional[str] = None
    notion_page_title: Optional[str] = None
    notion_page_url: Optional[str] = None
    metadata: Optional[Dict[str, JsonValue]] = Field(
        None,
        description="タスクのステータスや期日などの補足情報",
    )
