# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from useraccounts.domain.users.entities import upper_first
from useraccounts.domain.users.exceptions import DataAccessError
from useraccounts.domain.users.repositories import SortField, UserRepository
from useraccounts.shared.errors.base import InfrastructureError
from useraccounts.shared.logging import logger


@dataclass(slots=True, frozen=True)
class UserPage:
    items: list[dict[str, Any]]
    total: int
    page: int
    page_size: int


class ListUsersUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(
        self,
        *,
        filters: Mapping[str, Any],
        sort: Sequence[SortField],
        page: int,
        page_size: int,
    ) -> UserPage:
        # Names are stored upper-first, so filter the same way.
        query = {
            key: upper_first(value) if key in ("first_name", "last_name") else value
            for key, value in filters.items()
            if value is not None
        }
        logger.info(f"users.list: query={query} page={page} page_size={page_size}")
        try:
            total = self._users.count(query)
            rows = self._users.paginate(query, sort, page, page_size)
        except DataAccessError as exc:
            raise InfrastructureError(
                "An error occurred while retrieving registered users list"
            ) from exc

        return UserPage(
            items=[row.projection() for row in rows],
            total=total,
            page=page,
            page_size=page_size,
        )


__all__ = ["ListUsersUseCase", "UserPage"]
