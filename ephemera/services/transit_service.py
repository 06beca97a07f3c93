import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from ephemera.cache.keys import CacheKeys
from ephemera.cache.transit_cache import TransitCache
from ephemera.domain.chart.schemas import PlanetaryPosition
from ephemera.domain.transits.transit_engine import TransitEngine

logger = logging.getLogger(__name__)


class TransitService:
    """
    Service wrapper around domain transit logic.

    Used by:
    - Transits API
    """

    def __init__(
        self,
        engine: TransitEngine,
        cache: Optional[TransitCache] = None,
    ):
        self.engine = engine
        self.cache = cache

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    async def get_current(
        self,
        *,
        natal_positions: List[PlanetaryPosition],
        chart_id: Optional[Union[UUID, str]] = None,
        timestamp: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Get ranked transits for a natal chart.

        Results are cached when a chart id is given: live queries per UTC
        hour, explicit timestamps per exact instant. The natal positions
        are part of the key.
        """
        live = timestamp is None
        if live:
            timestamp = datetime.now(timezone.utc)
        elif timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)

        use_cache = self.cache is not None and chart_id is not None

        if use_cache:
            cache_key = dict(
                chart_id=chart_id,
                natal_hash=CacheKeys.natal_hash(natal_positions),
                at=timestamp,
                limit=limit,
                exact=not live,
            )
            cached = await self.cache.get_transits(**cache_key)
            if cached:
                logger.debug(f"Transit cache hit for chart {chart_id}")
                return cached

        report = self.engine.report(natal_positions, at=timestamp, limit=limit)
        result = report.model_dump(mode="json")

        if use_cache:
            await self.cache.set_transits(**cache_key, data=result)

        return result
