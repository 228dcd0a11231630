# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from .entities import User

Filters = Mapping[str, Any]

FILTERABLE_FIELDS = frozenset({"id", "email", "first_name", "last_name", "user_role"})
SORTABLE_FIELDS = frozenset(
    {"email", "first_name", "last_name", "dob", "created_at", "updated_at"}
)


@dataclass(slots=True, frozen=True)
class SortField:
    field: str
    descending: bool = False


class UserRepository(Protocol):
    """Data access helper for users.

    Every method raises ``DataAccessError`` on store failure; unique index
    violations raise ``DuplicateKeyError``.
    """

    def find_one(self, **filters: Any) -> User | None: ...
    def find_by_id(self, user_id: str) -> User | None: ...
    def save(self, user: User, is_update: bool) -> User: ...
    def find_one_and_delete(self, **filters: Any) -> User | None: ...
    def count(self, filters: Filters) -> int: ...
    def paginate(
        self,
        filters: Filters,
        sort: Sequence[SortField],
        page: int,
        page_size: int,
    ) -> list[User]: ...


class TokenCache(Protocol):
    """Key-value cache holding live session tokens. Raises ``CacheError``.

    ``track`` indexes a key under its owner so ``revoke_owner`` can drop
    every live session of that owner at once.
    """

    def set(self, key: str, value: str, ttl_seconds: int) -> None: ...
    def get(self, key: str) -> str | None: ...
    def delete(self, key: str) -> None: ...
    def track(self, owner: str, key: str, ttl_seconds: int) -> None: ...
    def revoke_owner(self, owner: str) -> int: ...
    def close(self) -> None: ...
