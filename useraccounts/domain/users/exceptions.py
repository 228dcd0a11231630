# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from useraccounts.shared.errors.base import (
    DomainError,
    PreconditionFailedError,
    ResourceNotFoundError,
)

DUPLICATE_KEY_ERROR = "DUPLICATE_KEY"


class EmailAlreadyExistsError(DomainError):
    default_code = "EMAIL_ADDRESS_DUPLICATION"
    default_status = HTTPStatus.BAD_REQUEST
    default_message = (
        "An email address is already exist in a system, Please try another email address"
    )

    def __init__(self, body: str = "registration_body") -> None:
        super().__init__(
            errors=[
                {
                    "message": "An email address is already register for some other user",
                    "path": [body, "email"],
                }
            ]
        )


class InvalidCredentialsError(DomainError):
    default_code = "UNAUTHORIZED"
    default_status = HTTPStatus.UNAUTHORIZED
    default_message = "Invalid user credentials found"


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, message: str = "User not found") -> None:
        super().__init__(message)


class EmptyUpdateError(PreconditionFailedError):
    def __init__(self) -> None:
        super().__init__(
            "At least one property to be set for user update",
            errors=[
                {
                    "message": "User request payload have to be set at least one property to update",
                    "path": ["update_body"],
                }
            ]
        )


class DataAccessError(Exception):
    """Raised by repositories for any store failure."""

    code: str = "DATA_ACCESS_ERROR"


class DuplicateKeyError(DataAccessError):
    code = DUPLICATE_KEY_ERROR

    def __init__(self, message: str = "duplicate key", *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class CacheError(Exception):
    """Raised by token cache adapters when the backend cannot be reached."""
