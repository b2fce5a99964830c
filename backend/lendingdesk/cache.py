from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Literal, TypeVar

from pydantic import BaseModel
from redis.asyncio import Redis

from lendingdesk.config.settings import Settings

logger = logging.getLogger(__name__)

CacheEntity = Literal["user", "reserve", "balance", "allowance"]
ModelT = TypeVar("ModelT", bound=BaseModel)


def cache_key(entity: CacheEntity, address: str, *sub_keys: str) -> str:
    parts = [entity, address.lower(), *(key.lower() for key in sub_keys)]
    return ":".join(parts)


def build_redis_client(settings: Settings) -> Redis:
    return Redis.from_url(settings.redis_url, password=settings.redis_token)


class SnapshotCache:
    """TTL key-value store over Redis. Never fetches on its own; a broken store reads as a miss."""

    def __init__(self, client: Redis) -> None:
        self.client = client

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self.client.get(key)
        except Exception as exc:
            logger.warning("Cache get failed for %s: %s", key, exc)
            return None

        if not raw:
            return None

        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError, ValueError):
            logger.warning("Discarding undecodable cache entry %s", key)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            await self.client.setex(key, ttl_seconds, json.dumps(value))
        except Exception as exc:
            logger.warning("Cache set failed for %s: %s", key, exc)
            return None
        logger.debug("Cache set for %s (ttl=%ss)", key, ttl_seconds)

    async def invalidate(self, key: str) -> None:
        try:
            await self.client.delete(key)
        except Exception as exc:
            logger.warning("Cache invalidation failed for %s: %s", key, exc)

    async def close(self) -> None:
        await self.client.aclose()


async def read_through(
    cache: SnapshotCache,
    key: str,
    ttl_seconds: int,
    fetch: Callable[[], Awaitable[ModelT]],
    model: type[ModelT],
) -> tuple[ModelT, bool]:
    """Serve ``key`` from cache, or fetch, store and return it. Returns ``(value, hit)``.

    Concurrent misses on the same key each call ``fetch``; reads are idempotent.
    """
    cached = await cache.get(key)
    if cached is not None:
        try:
            value = model.model_validate(cached)
        except ValueError:
            logger.warning("Cached payload for %s no longer matches %s", key, model.__name__)
        else:
            logger.debug("Cache hit for %s", key)
            return value, True

    logger.debug("Cache miss for %s", key)
    fresh = await fetch()
    await cache.set(key, fresh.model_dump(mode="json", by_alias=True), ttl_seconds)
    return fresh, False
