import unittest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from ephemera.cache.keys import CacheKeys
from ephemera.cache.transit_cache import TransitCache
from ephemera.domain.chart.schemas import PlanetaryPosition
from ephemera.domain.chart.zodiac import PLANETS, CelestialBody
from ephemera.domain.transits.transit_engine import TransitEngine
from ephemera.services.transit_service import TransitService

from tests.fakes import FakeEphemerisProvider

NOW = datetime(2024, 3, 1, 9, 15, tzinfo=timezone.utc)


def make_engine():
    longitudes = {body: 15.0 for body in PLANETS}
    longitudes[CelestialBody.PLUTO] = 180.5
    return TransitEngine(FakeEphemerisProvider(longitudes=longitudes, north_node=15.0))


class InMemoryRedis:
    """
    Just enough of redis.asyncio.Redis for TransitCache.
    """

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value


class TestTransitService(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.natal = [PlanetaryPosition.from_longitude(CelestialBody.SUN, 0.0)]
        self.cache = MagicMock()
        self.cache.get_transits = AsyncMock(return_value=None)
        self.cache.set_transits = AsyncMock()

    async def test_without_cache(self):
        service = TransitService(make_engine())

        result = await service.get_current(natal_positions=self.natal, timestamp=NOW)

        self.assertEqual(result["timestamp"], "2024-03-01T09:15:00+00:00")
        self.assertEqual(len(result["transits"]), 1)
        transit = result["transits"][0]
        self.assertEqual(transit["transiting"]["body"], "Pluto")
        self.assertEqual(transit["aspect_type"], "Opposition")
        self.assertEqual(transit["significance"], 16)

    async def test_cache_miss_stores_report(self):
        service = TransitService(make_engine(), self.cache)

        result = await service.get_current(
            natal_positions=self.natal, chart_id="chart-1", timestamp=NOW, limit=6,
        )

        expected_key = dict(
            chart_id="chart-1",
            natal_hash=CacheKeys.natal_hash(self.natal),
            at=NOW,
            limit=6,
            exact=True,
        )
        self.cache.get_transits.assert_awaited_once_with(**expected_key)
        self.cache.set_transits.assert_awaited_once_with(**expected_key, data=result)

    async def test_live_query_uses_hourly_bucket(self):
        service = TransitService(make_engine(), self.cache)

        await service.get_current(natal_positions=self.natal, chart_id="chart-1")

        self.assertFalse(self.cache.get_transits.await_args.kwargs["exact"])

    async def test_cache_hit_skips_engine(self):
        cached = {"timestamp": "2024-03-01T09:15:00+00:00", "transits": [], "calculation_version": "v1"}
        self.cache.get_transits.return_value = cached
        engine = MagicMock()
        service = TransitService(engine, self.cache)

        result = await service.get_current(natal_positions=self.natal, chart_id="chart-1", timestamp=NOW)

        self.assertEqual(result, cached)
        engine.report.assert_not_called()
        self.cache.set_transits.assert_not_awaited()

    async def test_cache_needs_chart_id(self):
        service = TransitService(make_engine(), self.cache)

        await service.get_current(natal_positions=self.natal, timestamp=NOW)

        self.cache.get_transits.assert_not_awaited()
        self.cache.set_transits.assert_not_awaited()

    async def test_explicit_instants_in_same_hour_are_not_shared(self):
        service = TransitService(make_engine(), TransitCache(InMemoryRedis()))
        nine = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
        nine_fifty = datetime(2024, 3, 1, 9, 50, tzinfo=timezone.utc)

        await service.get_current(natal_positions=self.natal, chart_id="c1", timestamp=nine)
        later = await service.get_current(natal_positions=self.natal, chart_id="c1", timestamp=nine_fifty)

        self.assertEqual(later["timestamp"], "2024-03-01T09:50:00+00:00")

        again = await service.get_current(natal_positions=self.natal, chart_id="c1", timestamp=nine)
        self.assertEqual(again["timestamp"], "2024-03-01T09:00:00+00:00")

    async def test_changed_natal_positions_miss_the_cache(self):
        service = TransitService(make_engine(), TransitCache(InMemoryRedis()))

        first = await service.get_current(natal_positions=self.natal, chart_id="c1", timestamp=NOW)
        moved = [PlanetaryPosition.from_longitude(CelestialBody.SUN, 90.0)]
        second = await service.get_current(natal_positions=moved, chart_id="c1", timestamp=NOW)

        self.assertEqual(len(first["transits"]), 1)
        self.assertEqual(second["transits"][0]["natal"]["longitude"], 90.0)

    async def test_naive_timestamp_is_utc(self):
        service = TransitService(make_engine())

        result = await service.get_current(
            natal_positions=self.natal, timestamp=datetime(2024, 3, 1, 9, 15),
        )

        self.assertEqual(result["timestamp"], "2024-03-01T09:15:00+00:00")


if __name__ == "__main__":
    unittest.main()
