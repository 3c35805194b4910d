# backend/cliq_notion/users/service.py

"""
リクエスト元の Cliq ユーザー ID から cliq_users の行を引き当てるサービス。

初回アクセス時はユーザー行とデフォルト通知設定を作成する。
同じ Cliq ユーザーから初回リクエストが同時に届いた場合は、
一意制約違反を受けた側が作成済みの行を読み直して合流する。
"""

import logging
from typing import Optional

from cliq_notion.storage import (
    CliqUser,
    NewCliqUser,
    SettingsUpdate,
    Storage,
    UniquenessViolation,
)

logger = logging.getLogger(__name__)


def default_settings_for(user_id: str) -> SettingsUpdate:
    """初回作成時の通知設定（リマインダー ON / 24 時間前 / 各種通知 ON）。"""
    return SettingsUpdate(
        cliq_user_id=user_id,
        reminders_enabled=True,
        reminder_hours_before=24,
        notify_on_task_assigned=True,
        notify_on_task_updated=True,
    )


def get_or_create_user(
    storage: Storage,
    cliq_user_id: str,
    display_name: Optional[str] = None,
    email: Optional[str] = None,
) -> CliqUser:
    """
    Cliq ユーザー ID に対応するユーザー行を返す。なければ作成する。

    1. 外部 ID で検索し、見つかればそのまま返す
    2. 見つからなければユーザーを作成し、成功した場合のみデフォルト通知設定を作成する
    3. 作成が UniquenessViolation で失敗した場合（別リクエストが先に作成した）は 1 回だけ読み直す
    4. 読み直しても見つからない場合は不整合なので、元の例外をそのまま送出する

    :raises UniquenessViolation: 3 → 4 に到達した場合。
    :raises StorageError: それ以外の永続化エラー。
    """
    user = storage.get_user_by_cliq_user_id(cliq_user_id)
    if user is not None:
        return user

    try:
        user = storage.create_user(
            NewCliqUser(
                cliq_user_id=cliq_user_id,
                cliq_display_name=display_name,
                cliq_email=email,
            )
        )
    except UniquenessViolation:
        logger.info(
            "Cliq user %s was created concurrently; reading the existing row.",
            cliq_user_id,
        )
        user = storage.get_user_by_cliq_user_id(cliq_user_id)
        if user is None:
            raise
        return user

    storage.upsert_notification_settings(default_settings_for(user.id))
    logger.info("Registered new Cliq user %s (id=%s).", cliq_user_id, user.id)
    return user
