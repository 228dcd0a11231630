# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from useraccounts.domain.users.entities import UserRole
from useraccounts.shared.errors.base import ForbiddenError
from useraccounts.shared.logging import logger

ACCESS_DENIED = "Access denied for a specific route"


def authorize(
    owner_or_admin_only: bool,
    authenticated_user: Mapping[str, Any],
    route_owner_id: str | None,
) -> None:
    """Raise ``ForbiddenError`` unless the caller may use the route.

    Must only run after the session has been verified.
    """
    if not owner_or_admin_only:
        return
    if authenticated_user.get("user_role") == UserRole.ADMIN.value:
        return
    if route_owner_id is not None and authenticated_user.get("id") == route_owner_id:
        return

    logger.warning(
        f"Access denied for a specific route to user with user id [{authenticated_user.get('id')}]"
    )
    raise ForbiddenError(ACCESS_DENIED)


__all__ = ["ACCESS_DENIED", "authorize"]
