# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast

ErrorDetails = Sequence[dict[str, Any]]


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    message: str = ""
    errors: ErrorDetails | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message or self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.errors:
            payload["errors"] = [dict(item) for item in self.errors]
        return payload


class DomainError(AppError):
    """Business-rule failure; subclasses pin ``code``/``status``/``message``."""

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        errors: ErrorDetails | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(type(self), "default_code", "DOMAIN_ERROR"))
        resolved_status = status or cast(
            HTTPStatus, getattr(type(self), "default_status", HTTPStatus.BAD_REQUEST)
        )
        resolved_message = message or cast(str, getattr(type(self), "default_message", ""))
        super().__init__(
            code=resolved_code,
            status=resolved_status,
            message=resolved_message,
            errors=errors,
        )


class ValidationError(AppError):
    def __init__(
        self,
        message: str = "Request validation failed",
        errors: ErrorDetails | None = None,
        code: str = "FAILED_TO_VALIDATE",
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.BAD_REQUEST,
            message=message,
            errors=errors,
        )


class UnauthorizedError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(code="UNAUTHORIZED", status=HTTPStatus.UNAUTHORIZED, message=message)


class ForbiddenError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(code="FORBIDDEN", status=HTTPStatus.FORBIDDEN, message=message)


class ResourceNotFoundError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(
            code="RESOURCE_NOT_FOUND",
            status=HTTPStatus.NOT_FOUND,
            message=message,
        )


class PreconditionFailedError(AppError):
    def __init__(
        self,
        message: str,
        errors: ErrorDetails | None = None,
        code: str = "PRECONDITION_FAILED",
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.PRECONDITION_FAILED,
            message=message,
            errors=errors,
        )


class InfrastructureError(AppError):
    """Generic runtime failure of the store, the cache or the process."""

    def __init__(
        self,
        message: str = "An internal error occurred",
        *,
        code: str = "RUNTIME_ERROR",
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=message,
        )


__all__ = [
    "AppError",
    "DomainError",
    "ErrorDetails",
    "ForbiddenError",
    "InfrastructureError",
    "PreconditionFailedError",
    "ResourceNotFoundError",
    "UnauthorizedError",
    "ValidationError",
]
