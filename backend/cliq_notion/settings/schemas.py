# backend/cliq_notion/settings/schemas.py

"""
通知設定のスキーマ定義。
"""

from typing import Optional

from pydantic import Field

from cliq_notion.storage import NotificationSettings
from cliq_notion.utils.schemas import CamelModel


class SettingsResponse(CamelModel):
    reminders_enabled: bool
    reminder_hours_before: int
    notify_on_task_assigned: bool
    notify_on_task_updated: bool

    @classmethod
    def from_row(cls, row: NotificationSettings) -> "SettingsResponse":
        return cls.model_validate(row)


class SettingsPatch(CamelModel):
    """
    PATCH /api/settings のリクエストボディ。指定した項目だけ更新する。
    """

    reminders_enabled: Optional[bool] = None
    reminder_hours_before: Optional[int] = Field(None, ge=0, le=24 * 7)
    notify_on_task_assigned: Optional[bool] = None
    notify_on_task_updated: Optional[bool] = None
