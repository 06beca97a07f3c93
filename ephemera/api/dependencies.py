from functools import lru_cache
from typing import Optional

from fastapi import Depends

from ephemera.cache.transit_cache import TransitCache
from ephemera.config import settings
from ephemera.domain.chart.engine import ChartEngine
from ephemera.domain.chart.ephemeris import EphemerisProvider, SwissEphemerisProvider
from ephemera.domain.transits.transit_engine import TransitEngine
from ephemera.services.chart_service import ChartService
from ephemera.services.location_service import LocationService
from ephemera.services.transit_service import TransitService


@lru_cache
def get_ephemeris_provider() -> EphemerisProvider:
    """
    Process-wide Swiss Ephemeris provider (read-only, safe to share).
    Override this dependency to swap the ephemeris source.
    """
    return SwissEphemerisProvider(ephe_path=settings.EPHE_PATH)


def get_location_service() -> LocationService:
    return LocationService()


def get_chart_service(
    provider: EphemerisProvider = Depends(get_ephemeris_provider),
    location_service: LocationService = Depends(get_location_service),
) -> ChartService:
    engine = ChartEngine(
        provider,
        include_angles_in_aspects=settings.ASPECTS_INCLUDE_ANGLES,
        transit_top_n=settings.TRANSIT_TOP_N,
    )
    return ChartService(engine, location_service)


def get_transit_cache() -> Optional[TransitCache]:
    if not settings.CACHE_ENABLED:
        return None
    return TransitCache()


def get_transit_service(
    provider: EphemerisProvider = Depends(get_ephemeris_provider),
    cache: Optional[TransitCache] = Depends(get_transit_cache),
) -> TransitService:
    return TransitService(TransitEngine(provider), cache)
