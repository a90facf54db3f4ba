"""Redis-backed cache for the built category tree."""

import json
import logging
from functools import lru_cache
from typing import Callable

import redis

from storefront.config import settings

logger = logging.getLogger(__name__)


@lru_cache
def get_redis_client() -> redis.Redis:
    """Get the process-wide Redis client.

    Connection settings keep timeouts short so an unreachable cache fails
    fast instead of blocking the request.
    """
    return redis.Redis.from_url(
        settings.redis_url,
        socket_connect_timeout=settings.redis_socket_timeout,
        socket_timeout=settings.redis_socket_timeout,
        retry_on_timeout=False,
        decode_responses=True,
    )


class TreeCache:
    """A single cache entry holding the serialized category forest.

    The cache is never a correctness dependency: read failures fall back to
    rebuilding, and write or invalidation failures are logged.
    """

    def __init__(
        self,
        client: redis.Redis,
        key: str = settings.category_tree_cache_key,
        ttl_seconds: int = settings.category_tree_cache_ttl,
    ):
        """Initialize with a Redis client, cache key and TTL."""
        self.client = client
        self.key = key
        self.ttl_seconds = ttl_seconds

    def get(self) -> list[dict] | None:
        """Return the cached tree, or None on a miss or an unavailable cache."""
        try:
            raw = self.client.get(self.key)
        except redis.RedisError as e:
            logger.warning(f"Cache read failed for '{self.key}', rebuilding: {e}")
            return None

        if raw is None:
            logger.debug(f"Cache miss: {self.key}")
            return None

        try:
            tree = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding unreadable cache entry '{self.key}': {e}")
            return None

        logger.debug(f"Cache hit: {self.key}")
        return tree

    def set(self, tree: list[dict]) -> None:
        """Store the tree with the configured TTL."""
        try:
            self.client.set(self.key, json.dumps(tree, default=str), ex=self.ttl_seconds)
            logger.debug(f"Cache write: {self.key} (TTL:{self.ttl_seconds})")
        except redis.RedisError as e:
            logger.warning(f"Cache write failed for '{self.key}': {e}")

    def invalidate(self) -> None:
        """Evict the cached tree.

        A failure leaves the previous tree in place until its TTL expires.
        """
        try:
            self.client.delete(self.key)
            logger.debug(f"Cache invalidated: {self.key}")
        except redis.RedisError as e:
            logger.error(
                f"Cache invalidation failed for '{self.key}'; a stale tree may be "
                f"served for up to {self.ttl_seconds}s: {e}"
            )

    def get_or_build(self, build: Callable[[], list[dict]]) -> list[dict]:
        """Serve the cached tree, or build it, cache it and return it."""
        tree = self.get()
        if tree is not None:
            return tree

        tree = build()
        self.set(tree)
        return tree
