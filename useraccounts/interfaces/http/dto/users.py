# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from useraccounts.interfaces.http.dto.auth import check_email
from useraccounts.interfaces.http.pagination import DEFAULT_SORT, parse_sort


def _check_dob(value: date) -> date:
    if value > date.today():
        raise PydanticCustomError(
            "dob_in_future",
            "Date of birth cannot be in the future",
            {},
        )
    return value


class RegisterRequestDTO(BaseModel):
    first_name: str = Field(min_length=1, max_length=128)
    last_name: str = Field(min_length=1, max_length=128)
    email: str = Field(min_length=3, max_length=254)
    dob: date
    password: str = Field(min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return check_email(value)

    @field_validator("dob")
    @classmethod
    def validate_dob(cls, value: date) -> date:
        return _check_dob(value)


class UpdateUserRequestDTO(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=128)
    last_name: str | None = Field(None, min_length=1, max_length=128)
    email: str | None = Field(None, min_length=3, max_length=254)
    dob: date | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        return check_email(value) if value is not None else value

    @field_validator("dob")
    @classmethod
    def validate_dob(cls, value: date | None) -> date | None:
        return _check_dob(value) if value is not None else value

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ChangePasswordRequestDTO(BaseModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=6, max_length=128)


class UserListQueryDTO(BaseModel):
    page: int = Field(1, ge=1)
    items_per_page: int = Field(10, ge=1, le=100, alias="itemsPerPage")
    sort_by: str = Field(DEFAULT_SORT, alias="sortBy")
    first_name: str | None = Field(None, min_length=1, max_length=128)
    last_name: str | None = Field(None, min_length=1, max_length=128)
    email: str | None = Field(None, min_length=3, max_length=254)
    user_role: Literal["User", "Admin"] | None = None

    model_config = ConfigDict(validate_by_name=True, extra="ignore")

    @field_validator("sort_by")
    @classmethod
    def validate_sort_by(cls, value: str) -> str:
        try:
            parse_sort(value)
        except ValueError as exc:
            raise PydanticCustomError("sort_invalid", str(exc), {}) from exc
        return value

    def filters(self) -> dict[str, Any]:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "user_role": self.user_role,
        }
