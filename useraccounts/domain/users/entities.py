# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from useraccounts.domain.exceptions import InvariantViolation

from .credentials import derive_hash, generate_salt, hashes_match

UPDATABLE_FIELDS = ("first_name", "last_name", "email", "dob")


class UserRole(str, Enum):
    USER = "User"
    ADMIN = "Admin"


def upper_first(value: str) -> str:
    return value[:1].upper() + value[1:] if value else value


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class User:
    email: str
    first_name: str
    last_name: str
    dob: date
    user_role: UserRole = UserRole.USER
    id: str = field(default_factory=_new_id)
    salt: str | None = None
    password_hash: str | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    version: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.user_role, UserRole):
            try:
                self.user_role = UserRole(self.user_role)
            except ValueError as exc:
                raise InvariantViolation(
                    f"unknown role {self.user_role!r}", field="user_role"
                ) from exc
        if (self.salt is None) != (self.password_hash is None):
            raise InvariantViolation("salt and hash must be set together", field="password")

    def set_password(self, password: str) -> None:
        salt = generate_salt()
        self.password_hash = derive_hash(password, salt)
        self.salt = salt

    def validate_password(self, password: str) -> bool:
        if not self.salt or not self.password_hash:
            return False
        return hashes_match(derive_hash(password, self.salt), self.password_hash)

    def apply_changes(self, changes: Mapping[str, Any]) -> None:
        for key, value in changes.items():
            if key not in UPDATABLE_FIELDS:
                raise InvariantViolation("field cannot be updated", field=key)
            if key in ("first_name", "last_name"):
                value = upper_first(value)
            setattr(self, key, value)

    def projection(self) -> dict[str, Any]:
        """Public view of the user: everything except salt and hash."""
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "dob": self.dob.strftime("%Y-%m-%d"),
            "user_role": self.user_role.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "version": self.version,
        }
