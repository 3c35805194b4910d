# backend/cliq_notion/users/config.py

"""
リクエスト元ユーザーの識別に関する設定値。
"""

from dataclasses import dataclass
from functools import lru_cache

from cliq_notion.utils.config import get_env


@dataclass(frozen=True)
class IdentityConfig:
    """ヘッダーで Cliq ユーザーが渡されなかった場合に使う既定値。"""

    default_user_id: str
    default_display_name: str


@lru_cache()
def get_identity_config() -> IdentityConfig:
    """
    任意:
      - CLIQ_DEFAULT_USER_ID      (デフォルト: demo-user-001)
      - CLIQ_DEFAULT_DISPLAY_NAME (デフォルト: Demo User)
    """
    return IdentityConfig(
        default_user_id=get_env("CLIQ_DEFAULT_USER_ID", default="demo-user-001", required=False),
        default_display_name=get_env(
            "CLIQ_DEFAULT_DISPLAY_NAME",
            default="Demo User",
            required=False,
        ),
    )
