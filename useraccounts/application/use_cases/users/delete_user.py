# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from useraccounts.domain.users.exceptions import CacheError, DataAccessError, UserNotFoundError
from useraccounts.domain.users.repositories import TokenCache, UserRepository
from useraccounts.infrastructure.observability import record_session_event
from useraccounts.shared.errors.base import InfrastructureError
from useraccounts.shared.logging import logger


class DeleteUserUseCase:
    def __init__(self, *, users: UserRepository, cache: TokenCache) -> None:
        self._users = users
        self._cache = cache

    def execute(
        self, user_id: str, token: str | None, caller_id: str | None = None
    ) -> dict[str, Any]:
        """Remove the user and every live session it holds.

        The presented ``token`` is also dropped when the caller deletes itself;
        an admin deleting someone else keeps its own session.
        """
        try:
            user = self._users.find_one_and_delete(id=user_id)
        except DataAccessError as exc:
            raise InfrastructureError(
                f"An error occurred while deleting the user detail for user id [{user_id}]"
            ) from exc
        if user is None:
            raise UserNotFoundError(f"No record found for user with user id [{user_id}]")

        # The record is gone already; token cleanup must not fail the request.
        try:
            revoked = self._cache.revoke_owner(user_id)
            if token and caller_id == user_id:
                self._cache.delete(token)
        except CacheError:
            logger.exception(
                f"users.delete: failed to remove tokens from cache for user id [{user_id}]"
            )
        else:
            record_session_event("revoked")
            logger.debug(f"users.delete: revoked {revoked} session(s) for user id [{user_id}]")

        logger.info(f"users.delete: ok user_id={user_id}")
        return user.projection()


__all__ = ["DeleteUserUseCase"]
