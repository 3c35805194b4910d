# backend/cliq_notion/cliq/factory.py

"""
CliqService の簡易ファクトリ。

現時点では LoggingCliqSender を使う CliqService を返す。
Bot API 経由の Sender を追加する場合もここで組み立てを切り替える。
インスタンスの共有は呼び出し側（main.create_app）に任せ、ここではキャッシュしない。
"""

from __future__ import annotations

import logging
from typing import Optional

from .service import CliqService, LoggingCliqSender


def build_cliq_service(logger_: Optional[logging.Logger] = None) -> CliqService:
    return CliqService(LoggingCliqSender(logger_=logger_))


__all__ = ["build_cliq_service"]
