from __future__ import annotations

import copy
from collections.abc import Sequence
from datetime import date
from typing import Any

from useraccounts.domain.users.entities import User
from useraccounts.domain.users.exceptions import CacheError, DuplicateKeyError
from useraccounts.domain.users.repositories import Filters, SortField, TokenCache, UserRepository

TEST_SECRET = "unit-test-secret-key-that-is-long-enough"


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self.users: dict[str, User] = {}

    def _matches(self, user: User, filters: Filters) -> bool:
        for key, value in filters.items():
            actual = getattr(user, key)
            if key == "user_role":
                actual = actual.value
            if actual != value:
                return False
        return True

    def find_one(self, **filters: Any) -> User | None:
        for user in self.users.values():
            if self._matches(user, filters):
                return copy.deepcopy(user)
        return None

    def find_by_id(self, user_id: str) -> User | None:
        user = self.users.get(user_id)
        return copy.deepcopy(user) if user else None

    def save(self, user: User, is_update: bool) -> User:
        for other in self.users.values():
            if other.id != user.id and other.email == user.email:
                raise DuplicateKeyError("email taken", field="email")
        stored = copy.deepcopy(user)
        stored.version = user.version + 1
        self.users[user.id] = stored
        return copy.deepcopy(stored)

    def find_one_and_delete(self, **filters: Any) -> User | None:
        found = self.find_one(**filters)
        if found is not None:
            del self.users[found.id]
        return found

    def count(self, filters: Filters) -> int:
        return sum(1 for user in self.users.values() if self._matches(user, filters))

    def paginate(
        self,
        filters: Filters,
        sort: Sequence[SortField],
        page: int,
        page_size: int,
    ) -> list[User]:
        rows = [user for user in self.users.values() if self._matches(user, filters)]
        for item in reversed(list(sort)):
            rows.sort(key=lambda u: getattr(u, item.field), reverse=item.descending)
        start = (page - 1) * page_size
        return [copy.deepcopy(user) for user in rows[start : start + page_size]]


class DictTokenCache(TokenCache):
    """Plain dict cache; flip ``failing`` to simulate an unreachable backend."""

    def __init__(self) -> None:
        self.entries: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.owners: dict[str, set[str]] = {}
        self.failing = False

    def _check(self) -> None:
        if self.failing:
            raise CacheError("cache unavailable")

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._check()
        self.entries[key] = value
        self.ttls[key] = ttl_seconds

    def get(self, key: str) -> str | None:
        self._check()
        return self.entries.get(key)

    def delete(self, key: str) -> None:
        self._check()
        self.entries.pop(key, None)

    def track(self, owner: str, key: str, ttl_seconds: int) -> None:
        self._check()
        self.owners.setdefault(owner, set()).add(key)

    def revoke_owner(self, owner: str) -> int:
        self._check()
        keys = self.owners.pop(owner, set())
        return sum(1 for key in keys if self.entries.pop(key, None) is not None)

    def close(self) -> None:
        self.entries.clear()
        self.owners.clear()


def make_user(
    email: str = "jane@example.com", password: str | None = "s3cret-pass", **kwargs: Any
) -> User:
    user = User(
        email=email,
        first_name=kwargs.pop("first_name", "Jane"),
        last_name=kwargs.pop("last_name", "Doe"),
        dob=kwargs.pop("dob", date(1990, 5, 17)),
        **kwargs,
    )
    if password is not None:
        user.set_password(password)
    return user
