# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from useraccounts.domain.users.entities import User, UserRole
from useraccounts.domain.users.exceptions import DataAccessError, DuplicateKeyError
from useraccounts.domain.users.repositories import (
    FILTERABLE_FIELDS,
    SORTABLE_FIELDS,
    Filters,
    SortField,
    UserRepository,
)
from useraccounts.infrastructure.db.models import UserRecord
from useraccounts.infrastructure.unit_of_work import unit_of_work_scope
from useraccounts.shared.logging import logger


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _to_domain(row: UserRecord) -> User:
    return User(
        id=row.id,
        email=row.email,
        first_name=row.first_name,
        last_name=row.last_name,
        dob=row.dob,
        user_role=UserRole(row.user_role),
        salt=row.salt,
        password_hash=row.password_hash,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
        version=row.version,
    )


def _copy_to_row(user: User, row: UserRecord) -> None:
    row.email = user.email
    row.first_name = user.first_name
    row.last_name = user.last_name
    row.dob = user.dob
    row.user_role = user.user_role.value
    row.salt = user.salt
    row.password_hash = user.password_hash


def _apply_filters(stmt: Select, filters: Filters) -> Select:
    for key, value in filters.items():
        if key not in FILTERABLE_FIELDS:
            raise ValueError(f"unsupported filter field: {key}")
        stmt = stmt.where(getattr(UserRecord, key) == value)
    return stmt


def _is_unique_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return "unique" in message or "duplicate" in message


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def find_one(self, **filters: Any) -> User | None:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = session.scalars(_apply_filters(select(UserRecord), filters).limit(1)).first()
                return _to_domain(row) if row else None
        except SQLAlchemyError as exc:
            logger.exception("users.repo: find_one failed")
            raise DataAccessError(str(exc)) from exc

    def find_by_id(self, user_id: str) -> User | None:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = session.get(UserRecord, user_id)
                return _to_domain(row) if row else None
        except SQLAlchemyError as exc:
            logger.exception(f"users.repo: find_by_id failed id={user_id}")
            raise DataAccessError(str(exc)) from exc

    def save(self, user: User, is_update: bool) -> User:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                if is_update:
                    row = session.get(UserRecord, user.id)
                    if row is None:
                        raise DataAccessError(f"user {user.id} disappeared before update")
                else:
                    row = UserRecord(id=user.id, created_at=user.created_at)
                    session.add(row)
                _copy_to_row(user, row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            if _is_unique_violation(exc):
                logger.info(f"users.repo: duplicate key on save id={user.id}")
                raise DuplicateKeyError(str(exc.orig), field="email") from exc
            logger.exception(f"users.repo: integrity error on save id={user.id}")
            raise DataAccessError(str(exc)) from exc
        except SQLAlchemyError as exc:
            logger.exception(f"users.repo: save failed id={user.id}")
            raise DataAccessError(str(exc)) from exc

    def find_one_and_delete(self, **filters: Any) -> User | None:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = session.scalars(_apply_filters(select(UserRecord), filters).limit(1)).first()
                if row is None:
                    return None
                removed = _to_domain(row)
                session.delete(row)
                return removed
        except SQLAlchemyError as exc:
            logger.exception("users.repo: find_one_and_delete failed")
            raise DataAccessError(str(exc)) from exc

    def count(self, filters: Filters) -> int:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                stmt = _apply_filters(select(func.count()).select_from(UserRecord), filters)
                return int(session.scalar(stmt) or 0)
        except SQLAlchemyError as exc:
            logger.exception("users.repo: count failed")
            raise DataAccessError(str(exc)) from exc

    def paginate(
        self,
        filters: Filters,
        sort: Sequence[SortField],
        page: int,
        page_size: int,
    ) -> list[User]:
        stmt = _apply_filters(select(UserRecord), filters)
        for item in sort:
            if item.field not in SORTABLE_FIELDS:
                raise ValueError(f"unsupported sort field: {item.field}")
            column = getattr(UserRecord, item.field)
            stmt = stmt.order_by(column.desc() if item.descending else column.asc())
        # Stable ordering between pages
        stmt = stmt.order_by(UserRecord.id.asc())
        stmt = stmt.offset((max(page, 1) - 1) * page_size).limit(page_size)
        try:
            with unit_of_work_scope(self._session_factory) as session:
                return [_to_domain(row) for row in session.scalars(stmt).all()]
        except SQLAlchemyError as exc:
            logger.exception("users.repo: paginate failed")
            raise DataAccessError(str(exc)) from exc


__all__ = ["SqlAlchemyUserRepository"]
