import unittest
from datetime import date, time
from unittest.mock import AsyncMock, MagicMock

from ephemera.domain.chart.engine import ChartEngine
from ephemera.domain.chart.errors import InvalidChartStateError
from ephemera.domain.chart.schemas import ChartInput, ChartResult
from ephemera.domain.chart.zodiac import ChartStatus, ChartType
from ephemera.services.chart_service import ChartService

from tests.fakes import FakeEphemerisProvider

LONDON_MATCH = {
    "display_name": "London, England, United Kingdom",
    "latitude": 51.50853,
    "longitude": -0.12574,
    "timezone": "Europe/London",
}


class TestChartService(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.engine = ChartEngine(FakeEphemerisProvider())
        self.location_service = MagicMock()
        self.location_service.resolve_place = AsyncMock(return_value=LONDON_MATCH)
        self.service = ChartService(self.engine, self.location_service)

    async def test_geocodes_missing_coordinates(self):
        result = await self.service.create_chart(ChartInput(
            birth_date=date(1990, 6, 15),
            birth_time=time(14, 30),
            birth_place="London",
        ))

        self.location_service.resolve_place.assert_awaited_once_with("London")
        self.assertEqual(result.status, ChartStatus.OK)
        self.assertEqual(result.chart_type, ChartType.FULL_NATAL)
        self.assertEqual(result.metadata.timezone, "Europe/London")
        self.assertAlmostEqual(result.metadata.latitude, 51.50853)

    async def test_resolved_input_skips_lookup(self):
        result = await self.service.create_chart(ChartInput(
            birth_date=date(1990, 6, 15),
            birth_time=time(14, 30),
            birth_place="London",
            latitude=51.5,
            longitude=-0.13,
            timezone="Europe/London",
        ))

        self.location_service.resolve_place.assert_not_awaited()
        self.assertEqual(result.status, ChartStatus.OK)

    async def test_no_match_needs_geocoding(self):
        self.location_service.resolve_place.return_value = None

        result = await self.service.create_chart(ChartInput(
            birth_date=date(1990, 6, 15),
            birth_place="Atlantis",
        ))

        self.assertEqual(result.status, ChartStatus.NEEDS_GEOCODING)

    async def test_without_location_service(self):
        service = ChartService(self.engine)

        result = await service.create_chart(ChartInput(
            birth_date=date(1990, 6, 15),
            birth_place="London",
        ))

        self.assertEqual(result.status, ChartStatus.NEEDS_GEOCODING)

    async def test_to_record(self):
        result = await self.service.create_chart(ChartInput(birth_date=date(1990, 6, 15)))

        record = self.service.to_record(result)
        self.assertEqual(record["chart_type"], "SIGN_BASED_NO_HOUSES")

        with self.assertRaises(InvalidChartStateError):
            self.service.to_record(ChartResult.failure(ChartStatus.ERROR, ["boom"]))


if __name__ == "__main__":
    unittest.main()
