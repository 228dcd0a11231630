# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from useraccounts.application.services.session_tokens import SessionIssuer, TokenCachingError
from useraccounts.domain.users.exceptions import (
    DataAccessError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from useraccounts.domain.users.repositories import UserRepository
from useraccounts.shared.errors.base import InfrastructureError
from useraccounts.shared.logging import logger


class LoginUserUseCase:
    def __init__(self, *, users: UserRepository, sessions: SessionIssuer) -> None:
        self._users = users
        self._sessions = sessions

    def execute(self, email: str, password: str) -> tuple[dict[str, Any], str]:
        logger.info(f"auth.login: request received for email address [{email}]")
        try:
            user = self._users.find_one(email=email)
        except DataAccessError as exc:
            raise InfrastructureError(
                f"An error occurred while retrieving user detail for email address [{email}]"
            ) from exc

        if user is None:
            logger.info(f"auth.login: user not found with email address [{email}]")
            raise UserNotFoundError(f"User not found with email address [{email}]")

        if not user.validate_password(password):
            logger.warning(f"auth.login: incorrect password for email address [{email}]")
            raise InvalidCredentialsError()

        projection = user.projection()
        try:
            token = self._sessions.issue(projection)
        except TokenCachingError as exc:
            raise InfrastructureError(
                f"An error occurred during generating the jwt token for email address [{email}]"
            ) from exc

        logger.info(f"auth.login: ok user_id={user.id}")
        return projection, token
