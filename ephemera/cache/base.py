import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ephemera.cache.redis import RedisClient

logger = logging.getLogger(__name__)


class BaseCache:
    """
    Best-effort JSON cache on top of Redis.

    A cache outage must never fail a calculation: read errors count as
    a miss and write errors are logged and dropped.
    """

    def __init__(self, client: Optional[redis.Redis] = None):
        self.client = client if client is not None else RedisClient.get_client()

    async def get(self, key: str) -> Optional[Any]:
        try:
            value = await self.client.get(key)
        except RedisError as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None
        if value is None:
            return None
        return RedisClient.deserialize(value)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        try:
            await self.client.setex(key, ttl, RedisClient.serialize(value))
        except RedisError as e:
            logger.warning(f"Cache write failed for {key}: {e}")

    async def delete_matching(self, pattern: str) -> int:
        """
        Delete every key matching a glob pattern; returns how many went.
        """
        deleted = 0
        try:
            async for key in self.client.scan_iter(match=pattern):
                deleted += await self.client.delete(key)
        except RedisError as e:
            logger.warning(f"Cache delete failed for {pattern} after {deleted} keys: {e}")
        return deleted
