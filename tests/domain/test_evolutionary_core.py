import unittest
from datetime import datetime, timezone

from ephemera.domain.chart.ephemeris import all_positions
from ephemera.domain.chart.evolutionary_core import (
    NOTE_HOUSE_SYSTEM,
    NOTE_HOUSES_OMITTED,
    NOTE_MOON_UNCERTAIN,
    EvolutionaryCoreBuilder,
)
from ephemera.domain.chart.zodiac import CelestialBody, ChartType, ZodiacSign

from tests.fakes import FakeEphemerisProvider

INSTANT = datetime(1990, 6, 15, 13, 30, tzinfo=timezone.utc)


class TestEvolutionaryCoreBuilder(unittest.TestCase):
    def setUp(self):
        self.planets = all_positions(FakeEphemerisProvider(), INSTANT)
        self.builder = EvolutionaryCoreBuilder()

    def test_extracts_core_points(self):
        core = self.builder.build(self.planets, ZodiacSign.SCORPIO, ChartType.FULL_NATAL)

        self.assertEqual(core.pluto.body, CelestialBody.PLUTO)
        self.assertEqual(core.north_node.sign, ZodiacSign.AQUARIUS)
        self.assertEqual(core.south_node.sign, ZodiacSign.LEO)
        self.assertEqual(core.sun.sign, ZodiacSign.GEMINI)
        self.assertEqual(core.moon.sign, ZodiacSign.LIBRA)
        self.assertEqual(core.rising_sign, ZodiacSign.SCORPIO)
        self.assertEqual(core.notes, [NOTE_HOUSE_SYSTEM])

    def test_reduced_tiers_note_missing_houses(self):
        for chart_type in (ChartType.NOON_CHART_NO_HOUSES, ChartType.SIGN_BASED_NO_HOUSES):
            core = self.builder.build(self.planets, None, chart_type)
            self.assertIsNone(core.rising_sign)
            self.assertEqual(core.notes, [NOTE_HOUSE_SYSTEM, NOTE_HOUSES_OMITTED])

    def test_uncertain_moon_is_noted(self):
        planets = [
            p.model_copy(update={"sign_uncertain": True}) if p.body == CelestialBody.MOON else p
            for p in self.planets
        ]
        core = self.builder.build(planets, None, ChartType.SIGN_BASED_NO_HOUSES)

        self.assertEqual(core.notes[-1], NOTE_MOON_UNCERTAIN)

    def test_missing_points_stay_empty(self):
        core = self.builder.build([], None, ChartType.FULL_NATAL)
        self.assertIsNone(core.pluto)
        self.assertIsNone(core.moon)


if __name__ == "__main__":
    unittest.main()
