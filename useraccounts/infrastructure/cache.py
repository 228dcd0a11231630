# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from dataclasses import dataclass
from threading import Lock

from redis import Redis
from redis.exceptions import RedisError

from useraccounts.domain.users.exceptions import CacheError
from useraccounts.domain.users.repositories import TokenCache
from useraccounts.shared.config.settings import CacheConfig
from useraccounts.shared.logging import logger


@dataclass(slots=True)
class CacheEntry:
    value: str
    expires_at: float

    def is_expired(self) -> bool:
        return time.monotonic() >= self.expires_at


class InMemoryTokenCache(TokenCache):
    """Process-local TTL cache; every operation holds the lock, so each is atomic.

    Expired entries are evicted when read and swept on every ``sweep_every``-th
    write, so sessions that are never used again do not accumulate.
    """

    def __init__(self, *, sweep_every: int = 256) -> None:
        self._lock = Lock()
        self._store: dict[str, CacheEntry] = {}
        self._owners: dict[str, set[str]] = {}
        self._sweep_every = max(sweep_every, 1)
        self._writes = 0

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        expires_at = time.monotonic() + ttl_seconds
        with self._lock:
            self._store[key] = CacheEntry(value=value, expires_at=expires_at)
            self._writes += 1
            if self._writes % self._sweep_every == 0:
                self._sweep()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.is_expired():
                logger.debug("cache: evicting expired entry")
                self._store.pop(key, None)
                return None
            return entry.value

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def track(self, owner: str, key: str, ttl_seconds: int) -> None:
        with self._lock:
            self._owners.setdefault(owner, set()).add(key)

    def revoke_owner(self, owner: str) -> int:
        with self._lock:
            keys = self._owners.pop(owner, set())
            removed = sum(1 for key in keys if self._store.pop(key, None) is not None)
        return removed

    def purge_expired(self) -> int:
        with self._lock:
            removed = self._sweep()
        return removed

    def _sweep(self) -> int:
        # caller holds the lock
        expired = [key for key, entry in self._store.items() if entry.is_expired()]
        for key in expired:
            self._store.pop(key, None)
        for owner in list(self._owners):
            live = {key for key in self._owners[owner] if key in self._store}
            if live:
                self._owners[owner] = live
            else:
                del self._owners[owner]
        if expired:
            logger.debug(f"cache: purged {len(expired)} expired entries")
        return len(expired)

    def close(self) -> None:
        with self._lock:
            logger.debug("cache: clear all keys")
            self._store.clear()
            self._owners.clear()


class RedisTokenCache(TokenCache):
    """Redis-backed cache; the server enforces TTLs and atomicity.

    Each owner's keys are indexed in a set ``user:<owner>:tokens`` whose TTL
    is reset to that of the newest key it holds.
    """

    def __init__(self, client: Redis, *, prefix: str = "") -> None:
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str, *, socket_timeout: float = 5.0) -> RedisTokenCache:
        client = Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def _owner_key(self, owner: str) -> str:
        return f"{self._prefix}user:{owner}:tokens"

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self._client.setex(self._key(key), ttl_seconds, value)
        except RedisError as exc:
            raise CacheError("redis SETEX failed") from exc

    def get(self, key: str) -> str | None:
        try:
            value = self._client.get(self._key(key))
        except RedisError as exc:
            raise CacheError("redis GET failed") from exc
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def delete(self, key: str) -> None:
        try:
            self._client.delete(self._key(key))
        except RedisError as exc:
            raise CacheError("redis DEL failed") from exc

    def track(self, owner: str, key: str, ttl_seconds: int) -> None:
        index = self._owner_key(owner)
        try:
            pipe = self._client.pipeline()
            pipe.sadd(index, key)
            pipe.expire(index, ttl_seconds)
            pipe.execute()
        except RedisError as exc:
            raise CacheError("redis SADD failed") from exc

    def revoke_owner(self, owner: str) -> int:
        index = self._owner_key(owner)
        try:
            members = self._client.smembers(index)
            keys = [
                self._key(m.decode("utf-8") if isinstance(m, bytes) else m) for m in members
            ]
            removed = int(self._client.delete(*keys)) if keys else 0
            self._client.delete(index)
        except RedisError as exc:
            raise CacheError("redis session revoke failed") from exc
        return removed

    def close(self) -> None:
        self._client.close()
        logger.info("cache: redis client closed")


def build_token_cache(config: CacheConfig) -> TokenCache:
    if config.url.startswith("memory://"):
        logger.info("cache: using in-memory token cache")
        return InMemoryTokenCache()
    if config.url.startswith(("redis://", "rediss://", "unix://")):
        logger.info("cache: using redis token cache")
        return RedisTokenCache.from_url(config.url, socket_timeout=config.socket_timeout)
    raise ValueError(f"Unsupported CACHE_URL scheme: {config.url.split('://', 1)[0]}")


__all__ = ["InMemoryTokenCache", "RedisTokenCache", "build_token_cache"]
