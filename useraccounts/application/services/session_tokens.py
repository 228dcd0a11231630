# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed session tokens whose liveness is owned by the token cache.

A token is only accepted when its signature and expiry verify *and* a cache
entry keyed by the exact token string exists and carries the same identity.
Deleting the cache entry therefore revokes the token immediately.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from useraccounts.domain.users.exceptions import CacheError
from useraccounts.domain.users.repositories import TokenCache
from useraccounts.infrastructure.observability import record_session_event
from useraccounts.shared.errors.base import InfrastructureError, UnauthorizedError
from useraccounts.shared.logging import logger

TOKEN_NOT_FOUND = "Access token not found"
TOKEN_INVALID = "Invalid access token found"
TOKEN_EXPIRED = "Given token has been expired"
TOKEN_VERIFY_FAILED = "An error occurred while verifying the access token"

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenCachingError(Exception):
    """The token was signed but its cache entry could not be written."""

    def __init__(self, message: str = "token caching failed") -> None:
        super().__init__(message)


class SessionIssuer:
    def __init__(
        self,
        *,
        cache: TokenCache,
        secret: str,
        algorithm: str = "HS256",
        expires_in: int = 3600,
        clock: Clock = _utcnow,
    ) -> None:
        self._cache = cache
        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = expires_in
        self._clock = clock

    def issue(self, projection: Mapping[str, Any]) -> str:
        claims = {
            "email": projection["email"],
            "id": projection["id"],
            "role": projection["user_role"],
            # Two sessions issued in the same second must still get distinct cache keys
            "jti": uuid.uuid4().hex,
            "exp": self._clock() + timedelta(seconds=self._expires_in),
        }
        # Signing errors only come from misconfiguration; let them propagate.
        token = jwt.encode(claims, self._secret, algorithm=self._algorithm)

        try:
            self._cache.set(token, json.dumps(dict(projection)), self._expires_in)
            self._cache.track(projection["id"], token, self._expires_in)
        except CacheError as exc:
            logger.opt(exception=exc).error(
                f"session.issue: failed to cache token for user={projection['id']}"
            )
            raise TokenCachingError() from exc

        record_session_event("issued")
        logger.info(
            f"session.issue: ok user={projection['id']} ttl={self._expires_in}s"
        )
        return token


class SessionVerifier:
    def __init__(
        self,
        *,
        cache: TokenCache,
        secret: str,
        algorithm: str = "HS256",
    ) -> None:
        self._cache = cache
        self._secret = secret
        self._algorithm = algorithm

    def verify(self, token: str | None) -> dict[str, Any]:
        """Return the cached user projection bound to ``token``."""
        if not token:
            logger.debug("session.verify: request does not carry an access token")
            record_session_event("rejected")
            raise UnauthorizedError(TOKEN_NOT_FOUND)

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "id", "email"]},
            )
        except jwt.PyJWTError as exc:
            logger.warning(f"session.verify: token rejected ({type(exc).__name__})")
            record_session_event("rejected")
            raise UnauthorizedError(TOKEN_INVALID) from exc

        try:
            cached = self._cache.get(token)
        except CacheError as exc:
            logger.opt(exception=exc).error(
                f"session.verify: cache lookup failed for user={claims['id']}"
            )
            raise InfrastructureError(TOKEN_VERIFY_FAILED) from exc

        user_detail = self._decode_cached(cached)
        if (
            user_detail is None
            or user_detail.get("id") != claims["id"]
            or user_detail.get("email") != claims["email"]
        ):
            logger.info(f"session.verify: no live session for user={claims['id']}")
            record_session_event("rejected")
            raise UnauthorizedError(TOKEN_EXPIRED)

        record_session_event("verified")
        return user_detail

    @staticmethod
    def _decode_cached(cached: str | None) -> dict[str, Any] | None:
        if cached is None:
            return None
        try:
            value = json.loads(cached)
        except ValueError:
            logger.warning("session.verify: cached session entry is not valid JSON")
            return None
        return value if isinstance(value, dict) else None


__all__ = [
    "TOKEN_EXPIRED",
    "TOKEN_INVALID",
    "TOKEN_NOT_FOUND",
    "TOKEN_VERIFY_FAILED",
    "SessionIssuer",
    "SessionVerifier",
    "TokenCachingError",
]
