# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def format_pydantic_errors(
    exc: PydanticValidationError, *, root: str | None = None
) -> list[dict[str, Any]]:
    errors_list = []

    for error in exc.errors():
        loc = error.get("loc", ())
        path = [str(part) for part in loc if part is not None]
        if root:
            path.insert(0, root)

        error_entry: dict[str, Any] = {
            "message": error.get("msg", "Invalid value"),
            "path": path,
            "type": error.get("type", "value_error"),
        }
        errors_list.append(error_entry)

    return errors_list


def raise_validation_error(exc: PydanticValidationError, *, root: str | None = None) -> NoReturn:
    errors = format_pydantic_errors(exc, root=root)
    raise ValidationError("Request validation failed", errors) from exc


__all__ = [
    "format_pydantic_errors",
    "raise_validation_error",
]
