# backend/cliq_notion/utils/schemas.py

"""
ウィジェット向けレスポンスの共通ベースモデル。

フロントエンド（React のタブダッシュボード）は camelCase の JSON を期待するため、
Python 側は snake_case のまま、出力時だけ camelCase にする。
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
