from datetime import datetime
from typing import Any, Dict, Optional, Union
from uuid import UUID

import redis.asyncio as redis

from ephemera.cache.base import BaseCache
from ephemera.cache.keys import CacheKeys
from ephemera.config import settings


class TransitCache(BaseCache):
    """
    Ranked transit reports per chart, natal positions, instant and limit.

    Live ("now") queries share one entry per UTC hour; a query for an
    explicit instant only ever matches that same instant. Transits are
    recomputed on demand; the cache only absorbs repeated queries.
    """

    def __init__(self, client: Optional[redis.Redis] = None, ttl: Optional[int] = None):
        super().__init__(client)
        self.ttl = ttl if ttl is not None else settings.TRANSIT_CACHE_TTL

    async def get_transits(
        self,
        *,
        chart_id: Union[UUID, str],
        natal_hash: str,
        at: datetime,
        limit: Optional[int] = None,
        exact: bool = False,
    ) -> Optional[Dict[str, Any]]:
        return await self.get(CacheKeys.transit(chart_id, natal_hash, at, limit, exact))

    async def set_transits(
        self,
        *,
        chart_id: Union[UUID, str],
        natal_hash: str,
        at: datetime,
        data: Dict[str, Any],
        limit: Optional[int] = None,
        exact: bool = False,
    ) -> None:
        await self.set(CacheKeys.transit(chart_id, natal_hash, at, limit, exact), data, self.ttl)

    async def invalidate(self, *, chart_id: Union[UUID, str]) -> int:
        """
        Drop every cached entry of a chart, e.g. after its birth data changed.
        """
        return await self.delete_matching(CacheKeys.transit_pattern(chart_id))
