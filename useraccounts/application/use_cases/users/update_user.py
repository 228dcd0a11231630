# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from useraccounts.domain.users.exceptions import (
    DataAccessError,
    DuplicateKeyError,
    EmailAlreadyExistsError,
    EmptyUpdateError,
    UserNotFoundError,
)
from useraccounts.domain.users.repositories import UserRepository
from useraccounts.shared.errors.base import InfrastructureError
from useraccounts.shared.logging import logger


class UpdateUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str, changes: Mapping[str, Any]) -> dict[str, Any]:
        if not changes:
            logger.warning(f"users.update: empty payload for user id [{user_id}]")
            raise EmptyUpdateError()

        try:
            user = self._users.find_by_id(user_id)
        except DataAccessError as exc:
            raise InfrastructureError(
                f"An error occurred while retrieving the user detail for user id [{user_id}] to update"
            ) from exc
        if user is None:
            raise UserNotFoundError(f"No record found for user with user id [{user_id}]")

        user.apply_changes(changes)
        try:
            updated = self._users.save(user, is_update=True)
        except DuplicateKeyError as exc:
            raise EmailAlreadyExistsError("update_body") from exc
        except DataAccessError as exc:
            raise InfrastructureError(
                f"An error occurred while updating record for user [{user_id}]"
            ) from exc

        logger.info(f"users.update: ok user_id={user_id} fields={sorted(changes)}")
        return updated.projection()


__all__ = ["UpdateUserUseCase"]
