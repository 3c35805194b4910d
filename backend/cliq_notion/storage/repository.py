# backend/cliq_notion/storage/repository.py

"""
永続化レイヤのリポジトリ（Storage）。

責務:
- 5 種類のレコード（ユーザー / トークン / マッピング / 通知設定 / 操作履歴）の取得・作成・upsert・削除
- SQLAlchemy の例外を StorageError 系の例外に変換する

方針:
- 「見つからない」は例外ではなく None / 空リストで返す
- 書き込みは 1 操作 = 1 行 = 1 トランザクション。複数行トランザクションは使わない
- インスタンスはプロセスで 1 つだけ作り、main.create_app から各ルーターへ注入する
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional, Type

from sqlalchemy import delete, select
from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.orm import Session, sessionmaker

from .models import (
    ActivityEntry,
    CliqUser,
    Mapping,
    NotificationSettings,
    NotionToken,
    utcnow,
)
from .schemas import (
    NewActivity,
    NewCliqUser,
    NewMapping,
    NewNotionToken,
    SettingsUpdate,
)

DEFAULT_ACTIVITY_LIMIT = 20


class StorageError(RuntimeError):
    """永続化レイヤ全般の例外。"""


class UniquenessViolation(StorageError):
    """一意制約違反（同じ Cliq ユーザー ID の二重登録など）。"""


class StoreUnavailable(StorageError):
    """DB への接続不可・タイムアウトなど、ストア自体が使えない場合の例外。"""


def _translate(
    exc: SQLAlchemyError,
    integrity_error: Type[StorageError],
) -> StorageError:
    if isinstance(exc, IntegrityError):
        return integrity_error(str(exc.orig or exc))
    if isinstance(exc, (OperationalError, InterfaceError)) or (
        isinstance(exc, DBAPIError) and exc.connection_invalidated
    ):
        return StoreUnavailable(f"Database is unavailable: {exc}")
    return StorageError(f"Database error: {exc}")


class Storage:
    """
    リレーショナルストア上のリポジトリ。

    sessionmaker を受け取り、操作ごとに短命なセッションを開く。
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    # ---- 内部ヘルパー -------------------------------------------------

    @contextmanager
    def _read(self) -> Iterator[Session]:
        with self._session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as exc:
                raise _translate(exc, StorageError) from exc

    @contextmanager
    def _write(
        self,
        integrity_error: Type[StorageError] = StorageError,
    ) -> Iterator[Session]:
        with self._session_factory() as session:
            try:
                yield session
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise _translate(exc, integrity_error) from exc

    # ---- Cliq ユーザー ------------------------------------------------

    def get_user(self, user_id: str) -> Optional[CliqUser]:
        with self._read() as session:
            return session.get(CliqUser, user_id)

    def get_user_by_cliq_user_id(self, cliq_user_id: str) -> Optional[CliqUser]:
        with self._read() as session:
            stmt = select(CliqUser).where(CliqUser.cliq_user_id == cliq_user_id)
            return session.scalars(stmt).first()

    def create_user(self, data: NewCliqUser) -> CliqUser:
        """
        ユーザーを新規作成する。

        :raises UniquenessViolation: 同じ cliq_user_id が既に存在する場合。
            呼び出し側で再取得できるよう、握りつぶさずに送出する。
        """
        user = CliqUser(**data.model_dump())
        with self._write(integrity_error=UniquenessViolation) as session:
            session.add(user)
        return user

    # ---- Notion トークン ----------------------------------------------

    def get_notion_token(self, user_id: str) -> Optional[NotionToken]:
        with self._read() as session:
            stmt = select(NotionToken).where(NotionToken.cliq_user_id == user_id)
            return session.scalars(stmt).first()

    def upsert_notion_token(self, data: NewNotionToken) -> NotionToken:
        """
        既存行があれば全項目を置き換えて updated_at を更新し、なければ新規作成する。
        """
        values = data.model_dump()
        with self._write() as session:
            stmt = select(NotionToken).where(NotionToken.cliq_user_id == data.cliq_user_id)
            token = session.scalars(stmt).first()
            if token is None:
                token = NotionToken(**values)
                session.add(token)
            else:
                for key, value in values.items():
                    setattr(token, key, value)
                token.updated_at = utcnow()
        return token

    def delete_notion_token(self, user_id: str) -> None:
        """該当行がなくてもエラーにはしない。"""
        with self._write() as session:
            session.execute(delete(NotionToken).where(NotionToken.cliq_user_id == user_id))

    # ---- マッピング ----------------------------------------------------

    def create_mapping(self, data: NewMapping) -> Mapping:
        mapping = Mapping(**data.model_dump())
        with self._write() as session:
            session.add(mapping)
        return mapping

    def get_mappings_by_user_id(self, user_id: str) -> List[Mapping]:
        with self._read() as session:
            stmt = (
                select(Mapping)
                .where(Mapping.cliq_user_id == user_id)
                # 同時刻の行は id 降順（UUID なので作成順ではないが、並びは毎回同じになる）
                .order_by(Mapping.created_at.desc(), Mapping.id.desc())
            )
            return list(session.scalars(stmt))

    def get_mapping_by_notion_page_id(self, page_id: str) -> Optional[Mapping]:
        # Webhook の逆引き用。複数あっても最初の 1 件だけ返す
        with self._read() as session:
            stmt = select(Mapping).where(Mapping.notion_page_id == page_id)
            return session.scalars(stmt).first()

    # ---- 通知設定 ------------------------------------------------------

    def get_notification_settings(self, user_id: str) -> Optional[NotificationSettings]:
        with self._read() as session:
            return self._find_settings(session, user_id)

    def upsert_notification_settings(self, data: SettingsUpdate) -> NotificationSettings:
        """
        既存行があれば指定項目を上書きして updated_at を更新し、なければ新規作成する。

        新規作成時、未指定の項目は列のデフォルト値（リマインダー ON / 24 時間前 / 通知 ON）になる。
        同じユーザーの行が並行して作成され一意制約違反になった場合は、
        作成済みの行に対して 1 回だけ更新をやり直す。
        """
        try:
            return self._apply_settings(data, integrity_error=UniquenessViolation)
        except UniquenessViolation:
            return self._apply_settings(data, integrity_error=StorageError)

    def _find_settings(self, session: Session, user_id: str) -> Optional[NotificationSettings]:
        stmt = select(NotificationSettings).where(NotificationSettings.cliq_user_id == user_id)
        return session.scalars(stmt).first()

    def _apply_settings(
        self,
        data: SettingsUpdate,
        integrity_error: Type[StorageError],
    ) -> NotificationSettings:
        changes = data.changes()
        with self._write(integrity_error=integrity_error) as session:
            settings = self._find_settings(session, data.cliq_user_id)
            if settings is None:
                settings = NotificationSettings(cliq_user_id=data.cliq_user_id, **changes)
                session.add(settings)
            else:
                for key, value in changes.items():
                    setattr(settings, key, value)
                settings.updated_at = utcnow()
        return settings

    # ---- 操作履歴 ------------------------------------------------------

    def create_activity(self, data: NewActivity) -> ActivityEntry:
        values = data.model_dump(exclude={"metadata"})
        entry = ActivityEntry(**values, metadata_=data.metadata)
        with self._write() as session:
            session.add(entry)
        return entry

    def get_activity_by_user_id(
        self,
        user_id: str,
        limit: int = DEFAULT_ACTIVITY_LIMIT,
    ) -> List[ActivityEntry]:
        """新しい順に最大 limit 件を返す（負の値は 0 件扱い）。"""
        limit = max(limit, 0)
        with self._read() as session:
            stmt = (
                select(ActivityEntry)
                .where(ActivityEntry.cliq_user_id == user_id)
                .order_by(ActivityEntry.created_at.desc(), ActivityEntry.id.desc())
                .limit(limit)
            )
            return list(session.scalars(stmt))
