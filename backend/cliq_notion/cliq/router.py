# backend/cliq_notion/cliq/router.py

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from cliq_notion.activity.service import ActivityLogger
from cliq_notion.dependencies import (
    CallerIdentity,
    NotionServiceFactory,
    get_activity_logger,
    get_caller_identity,
    get_notion_service_factory,
    get_storage,
    resolve_user,
)
from cliq_notion.storage import ActivityKind, NewMapping, Storage

from .commands import CONNECT_PATH, handle_slash_command
from .schemas import CliqMessage, MessageActionRequest, ResponseKind, SlashCommandRequest
from .service import format_slash_command_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cliq", tags=["cliq"])


@router.post(
    "/slash",
    response_model=CliqMessage,
    response_model_exclude_none=True,
    summary="/notion スラッシュコマンド",
)
def slash_command(body: SlashCommandRequest) -> CliqMessage:
    """
    Cliq のスラッシュコマンドを処理する。

    - 失敗時も Cliq 上に表示できるよう、HTTP エラーではなくエラー表示のメッセージを返す
    """
    try:
        return handle_slash_command(body.text)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Slash command failed: %r", body.text)
        return format_slash_command_response(ResponseKind.ERROR, "Error", str(exc))


@router.post(
    "/message-action",
    response_model=CliqMessage,
    response_model_exclude_none=True,
    summary="Cliq メッセージを Notion に保存",
)
def save_message_to_notion(
    body: MessageActionRequest,
    identity: CallerIdentity = Depends(get_caller_identity),
    storage: Storage = Depends(get_storage),
    factory: NotionServiceFactory = Depends(get_notion_service_factory),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> CliqMessage:
    """
    メッセージ本文から Notion ページを作成し、メッセージとページの対応を保存する。

    - 未接続の場合は接続を促すメッセージを返す
    - 失敗時はエラー表示のメッセージを返す
    """
    if body.user_id:
        identity = CallerIdentity(
            cliq_user_id=body.user_id,
            display_name=body.user_name or identity.display_name,
            email=None,
        )

    try:
        user = resolve_user(storage, identity)
        token = storage.get_notion_token(user.id)
        if token is None:
            return format_slash_command_response(
                ResponseKind.ERROR,
                "Notion Not Connected",
                "Connect your Notion workspace before saving messages.",
                action_url=CONNECT_PATH,
                action_label="Connect Notion",
            )

        title = f"Message from Cliq - {datetime.now(timezone.utc):%Y-%m-%d}"
        page = factory(token.access_token).create_page_from_text(title, body.message_text)

        storage.create_mapping(
            NewMapping(
                cliq_user_id=user.id,
                notion_page_id=page.id,
                notion_page_url=page.url,
                cliq_message_id=body.message_id,
                cliq_channel_id=body.channel_id,
            )
        )
        activity.log(
            user.id,
            ActivityKind.MESSAGE_SAVED,
            f'Saved a Cliq message as "{title}"',
            page_id=page.id,
            page_title=title,
            page_url=page.url,
            metadata={"cliq_message_id": body.message_id, "cliq_channel_id": body.channel_id},
        )
    except Exception:  # noqa: BLE001
        logger.exception("Failed to save Cliq message %s to Notion.", body.message_id)
        return format_slash_command_response(
            ResponseKind.ERROR,
            "Error",
            "Failed to save message to Notion",
        )

    return format_slash_command_response(
        ResponseKind.SUCCESS,
        "Saved to Notion",
        f'Message saved as: "{title}"',
        action_url=page.url,
        action_label="View in Notion",
    )
