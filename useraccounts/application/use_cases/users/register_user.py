# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import date
from typing import Any

from useraccounts.application.services.session_tokens import SessionIssuer, TokenCachingError
from useraccounts.domain.users.entities import User, upper_first
from useraccounts.domain.users.exceptions import (
    DataAccessError,
    DuplicateKeyError,
    EmailAlreadyExistsError,
)
from useraccounts.domain.users.repositories import UserRepository
from useraccounts.shared.errors.base import InfrastructureError
from useraccounts.shared.logging import logger


class RegisterUserUseCase:
    def __init__(self, *, users: UserRepository, sessions: SessionIssuer) -> None:
        self._users = users
        self._sessions = sessions

    def execute(
        self,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        dob: date,
    ) -> tuple[dict[str, Any], str]:
        logger.info(f"users.register: request received for email address [{email}]")
        user = User(
            email=email,
            first_name=upper_first(first_name),
            last_name=upper_first(last_name),
            dob=dob,
        )
        user.set_password(password)

        # Email uniqueness is decided by the store's unique index.
        try:
            persisted = self._users.save(user, is_update=False)
        except DuplicateKeyError as exc:
            logger.warning(f"users.register: email address [{email}] already registered")
            raise EmailAlreadyExistsError() from exc
        except DataAccessError as exc:
            raise InfrastructureError(
                f"An error occurred during registering user with email address [{email}]"
            ) from exc

        projection = persisted.projection()
        try:
            token = self._sessions.issue(projection)
        except TokenCachingError as exc:
            raise InfrastructureError(
                f"An error occurred during generating the jwt token for email address [{email}]"
            ) from exc

        logger.info(f"users.register: ok user_id={persisted.id}")
        return projection, token
