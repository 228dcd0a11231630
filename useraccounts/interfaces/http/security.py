# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, Protocol

from flask import g, request

from useraccounts.application.services.authorization import authorize
from useraccounts.application.services.session_tokens import SessionVerifier
from useraccounts.shared.logging import set_request_user

AUTHORIZATION_HEADER = "authorization"


class SessionProtected(Protocol):
    _verifier: SessionVerifier


def extract_token() -> str | None:
    """Read the session token; the header may be raw or ``Bearer``-prefixed."""
    header = request.headers.get(AUTHORIZATION_HEADER, "").strip()
    if header[:7].lower() == "bearer ":
        header = header[7:].strip()
    return header or None


def require_session(*, owner_or_admin: bool = False) -> Callable:
    """Verify the caller's session, then run the owner-or-admin gate.

    The route owner is the ``user_id`` view argument. On success the cached
    user projection is available as ``g.user_detail`` and the raw token as
    ``g.access_token``.
    """

    def decorator(view: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view)
        def inner(self: SessionProtected, *args: Any, **kwargs: Any) -> Any:
            token = extract_token()
            user_detail = self._verifier.verify(token)
            g.user_detail = user_detail
            g.access_token = token
            set_request_user(user_detail.get("id"))
            authorize(owner_or_admin, user_detail, kwargs.get("user_id"))
            return view(self, *args, **kwargs)

        return inner

    return decorator


__all__ = ["AUTHORIZATION_HEADER", "extract_token", "require_session"]
