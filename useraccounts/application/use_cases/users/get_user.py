# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from useraccounts.domain.users.exceptions import DataAccessError, UserNotFoundError
from useraccounts.domain.users.repositories import UserRepository
from useraccounts.shared.errors.base import InfrastructureError
from useraccounts.shared.logging import logger


class GetUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str) -> dict[str, Any]:
        try:
            user = self._users.find_by_id(user_id)
        except DataAccessError as exc:
            raise InfrastructureError(
                f"An error occurred while retrieving the user detail for user id [{user_id}]"
            ) from exc
        if user is None:
            logger.info(f"users.get: no record found for user id [{user_id}]")
            raise UserNotFoundError(f"No record found for user with user id [{user_id}]")
        return user.projection()


__all__ = ["GetUserUseCase"]
