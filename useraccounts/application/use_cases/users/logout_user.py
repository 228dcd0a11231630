"""Use-case for revoking access tokens."""

from __future__ import annotations

from useraccounts.domain.users.exceptions import CacheError
from useraccounts.domain.users.repositories import TokenCache
from useraccounts.infrastructure.observability import record_session_event
from useraccounts.shared.errors.base import InfrastructureError
from useraccounts.shared.logging import logger


class LogoutUserUseCase:
    def __init__(self, *, cache: TokenCache) -> None:
        self._cache = cache

    def execute(self, token: str, user_id: str | None = None) -> None:
        logger.info(f"auth.logout: request received for user id [{user_id}]")
        try:
            self._cache.delete(token)
        except CacheError as exc:
            raise InfrastructureError("An error occurred while logout from system") from exc
        record_session_event("revoked")
        logger.info(f"auth.logout: ok user_id={user_id}")
