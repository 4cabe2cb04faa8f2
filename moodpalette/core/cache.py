"""Key-value cache used to memoise model generations.

Two stores share one small async interface: Redis for deployments and an
in-process mapping for development and tests. ``CacheClient`` namespaces keys,
serialises values as JSON and turns every store failure into a cache miss so a
broken cache never blocks palette generation.
"""
from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar

from fastapi import Request
from redis.asyncio import Redis
from redis.exceptions import RedisError

from .config import AppSettings

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600
DEFAULT_TIMEOUT_SECONDS = 1.0

_CACHE_ERRORS = (RedisError, asyncio.TimeoutError, OSError, ValueError, TypeError)

T = TypeVar("T")


class CacheStore(Protocol):
    backend: str

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def ping(self) -> bool: ...

    async def close(self) -> None: ...


class InMemoryCacheStore:
    """Cache store that mimics the Redis ``GET``/``SET EX`` semantics."""

    backend = "memory"

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[str, tuple[str, float]] = {}
        self._clock = clock

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = (value, self._clock() + ttl_seconds)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class RedisCacheStore:
    """Wrapper around a real Redis connection."""

    backend = "redis"

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_url(cls, redis_url: str, *, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> "RedisCacheStore":
        client = Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=timeout,
            socket_timeout=timeout,
        )
        return cls(client)

    async def get(self, key: str) -> str | None:
        raw = await self._client.get(key)
        if isinstance(raw, bytes):
            raw = raw.decode()
        return raw

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._client.set(key, value, ex=ttl_seconds)

    async def ping(self) -> bool:
        return bool(await self._client.ping())

    async def close(self) -> None:
        await self._client.aclose()


class CacheClient:
    """Namespaced JSON cache whose failures degrade to "no cache"."""

    def __init__(
        self,
        store: CacheStore,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._store = store
        self._ttl_seconds = ttl_seconds
        self._timeout = timeout
        self._reachable: bool | None = None

    @property
    def backend(self) -> str:
        return self._store.backend

    @property
    def reachable(self) -> bool | None:
        """Result of the last ``connect`` probe, ``None`` before any probe."""
        return self._reachable

    @staticmethod
    def make_key(namespace: str, key: str) -> str:
        return f"{namespace}:{key}"

    async def _bounded(self, operation: Awaitable[T]) -> T:
        if self._timeout is None:
            return await operation
        return await asyncio.wait_for(operation, timeout=self._timeout)

    async def connect(self) -> bool:
        try:
            self._reachable = await self._bounded(self._store.ping())
        except _CACHE_ERRORS as exc:
            logger.warning("Cache backend %s unreachable, continuing without it: %s", self.backend, exc)
            self._reachable = False
        return self._reachable

    async def close(self) -> None:
        try:
            await self._bounded(self._store.close())
        except _CACHE_ERRORS as exc:
            logger.warning("Error closing cache backend %s: %s", self.backend, exc)

    async def get(self, namespace: str, key: str) -> Any | None:
        full_key = self.make_key(namespace, key)
        try:
            raw = await self._bounded(self._store.get(full_key))
            if raw is None:
                return None
            value = json.loads(raw)
        except _CACHE_ERRORS as exc:
            logger.warning("Error reading cache key %s: %s", full_key, exc)
            return None
        logger.debug("Cache hit for %s", full_key)
        return value

    async def set(self, namespace: str, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        full_key = self.make_key(namespace, key)
        try:
            payload = json.dumps(value)
            await self._bounded(self._store.set(full_key, payload, ttl_seconds or self._ttl_seconds))
        except _CACHE_ERRORS as exc:
            logger.warning("Error writing cache key %s: %s", full_key, exc)


def build_cache(settings: AppSettings) -> CacheClient:
    """Create the cache client described by the settings."""
    if settings.redis_url:
        store: CacheStore = RedisCacheStore.from_url(
            settings.redis_url, timeout=settings.cache_timeout
        )
    else:
        store = InMemoryCacheStore()
    return CacheClient(
        store,
        ttl_seconds=settings.cache_ttl_seconds,
        timeout=settings.cache_timeout,
    )


def get_cache(request: Request) -> CacheClient:
    """FastAPI dependency returning the cache created by the app lifespan."""
    return request.app.state.cache
