# backend/cliq_notion/settings/router.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from cliq_notion.dependencies import get_current_user, get_storage
from cliq_notion.storage import CliqUser, SettingsUpdate, Storage, StorageError

from .schemas import SettingsPatch, SettingsResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["settings"])


def _settings_error(user: CliqUser, exc: Exception) -> HTTPException:
    logger.error("Settings operation failed for user %s: %s", user.id, exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Failed to access notification settings.",
    )


@router.get(
    "/settings",
    response_model=SettingsResponse,
    summary="通知設定の取得",
    description="設定行がまだない場合はデフォルト値で作成してから返す。",
)
def get_settings(
    user: CliqUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> SettingsResponse:
    try:
        settings = storage.get_notification_settings(user.id)
        if settings is None:
            # 項目を指定せずに作成する（列のデフォルト値になる）。
            # 並行して作成 / 更新された行があっても、その値は上書きしない
            settings = storage.upsert_notification_settings(SettingsUpdate(cliq_user_id=user.id))
    except StorageError as exc:
        raise _settings_error(user, exc) from exc

    return SettingsResponse.from_row(settings)


@router.patch(
    "/settings",
    response_model=SettingsResponse,
    summary="通知設定の更新",
)
def update_settings(
    body: SettingsPatch,
    user: CliqUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> SettingsResponse:
    update = SettingsUpdate(cliq_user_id=user.id, **body.model_dump())
    try:
        settings = storage.upsert_notification_settings(update)
    except StorageError as exc:
        raise _settings_error(user, exc) from exc

    return SettingsResponse.from_row(settings)
