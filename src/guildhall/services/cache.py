"""Best-effort Redis cache for the public post listing.

The cache is a speedup only. Every Redis failure is logged and treated as a
miss, and every post, comment or like mutation bumps a version counter so
previously cached pages are never served again.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis

from guildhall.core.settings import settings

logger = logging.getLogger(__name__)

_VERSION_KEY = "guildhall:posts:version"


class ListingCache:
    """Versioned key/value cache for listing pages."""

    def __init__(self, client: Any | None, ttl_seconds: int = 60) -> None:
        self._redis = client
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_settings(cls) -> ListingCache:
        """Build the cache from configuration; disabled unless CACHE_ENABLED is set."""
        if not settings.cache_enabled:
            return cls(None)
        try:
            client = redis.Redis.from_url(settings.redis_url, socket_timeout=1.0)
        except (redis.RedisError, ValueError):
            logger.warning("Redis cache unavailable at %s", settings.redis_url, exc_info=True)
            return cls(None)
        return cls(client, settings.cache_ttl_seconds)

    @property
    def enabled(self) -> bool:
        return self._redis is not None

    def _version(self) -> int:
        raw = self._redis.get(_VERSION_KEY)
        return int(raw) if raw is not None else 0

    def _key(self, name: str) -> str:
        return f"guildhall:posts:v{self._version()}:{name}"

    def get(self, name: str) -> Any | None:
        if self._redis is None:
            return None
        try:
            raw = self._redis.get(self._key(name))
        except redis.RedisError:
            logger.warning("Cache read failed for %s", name, exc_info=True)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable cache entry %s", name)
            return None

    def set(self, name: str, value: Any) -> None:
        if self._redis is None:
            return
        try:
            self._redis.set(self._key(name), json.dumps(value), ex=self.ttl_seconds)
        except (redis.RedisError, TypeError):
            logger.warning("Cache write failed for %s", name, exc_info=True)

    def invalidate(self) -> None:
        """Retire every cached listing page."""
        if self._redis is None:
            return
        try:
            self._redis.incr(_VERSION_KEY)
        except redis.RedisError:
            logger.warning("Cache invalidation failed", exc_info=True)
