# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from useraccounts.domain.users.exceptions import (
    DataAccessError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from useraccounts.domain.users.repositories import UserRepository
from useraccounts.shared.errors.base import InfrastructureError
from useraccounts.shared.logging import logger


class ChangePasswordUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str, current_password: str, new_password: str) -> dict[str, Any]:
        try:
            user = self._users.find_by_id(user_id)
        except DataAccessError as exc:
            raise InfrastructureError(
                f"An error occurred while retrieving user record for user [{user_id}]"
            ) from exc
        if user is None:
            raise UserNotFoundError(f"User not found for user id [{user_id}]")

        if not user.validate_password(current_password):
            logger.warning(f"users.change_password: invalid current password for user id [{user_id}]")
            raise InvalidCredentialsError("Credentials does not match. Please try again")

        user.set_password(new_password)
        try:
            updated = self._users.save(user, is_update=True)
        except DataAccessError as exc:
            raise InfrastructureError(
                f"An error occurred while updating user's password for user id [{user_id}]"
            ) from exc

        logger.info(f"users.change_password: ok user_id={user_id}")
        return updated.projection()


__all__ = ["ChangePasswordUseCase"]
