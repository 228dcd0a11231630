# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import UPDATABLE_FIELDS, User, UserRole, upper_first
from .exceptions import (
    CacheError,
    DataAccessError,
    DuplicateKeyError,
    EmailAlreadyExistsError,
    EmptyUpdateError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from .repositories import (
    FILTERABLE_FIELDS,
    SORTABLE_FIELDS,
    SortField,
    TokenCache,
    UserRepository,
)

__all__ = [
    "FILTERABLE_FIELDS",
    "SORTABLE_FIELDS",
    "UPDATABLE_FIELDS",
    "CacheError",
    "DataAccessError",
    "DuplicateKeyError",
    "EmailAlreadyExistsError",
    "EmptyUpdateError",
    "InvalidCredentialsError",
    "SortField",
    "TokenCache",
    "User",
    "UserNotFoundError",
    "UserRepository",
    "UserRole",
    "upper_first",
]
