import unittest

from ephemera.domain.chart.aspect_calculator import (
    DEFAULT_ORB,
    LUMINARY_ORB,
    PERSONAL_ORB,
    AspectCalculator,
    natal_orb,
)
from ephemera.domain.chart.schemas import PlanetaryPosition
from ephemera.domain.chart.zodiac import AspectType, CelestialBody


def point(body, longitude):
    return PlanetaryPosition.from_longitude(body, longitude)


class TestNatalOrb(unittest.TestCase):
    def test_categories(self):
        self.assertEqual(natal_orb(CelestialBody.SUN), LUMINARY_ORB)
        self.assertEqual(natal_orb(CelestialBody.MOON), LUMINARY_ORB)
        self.assertEqual(natal_orb(CelestialBody.VENUS), PERSONAL_ORB)
        self.assertEqual(natal_orb(CelestialBody.SATURN), DEFAULT_ORB)
        self.assertEqual(natal_orb(CelestialBody.NORTH_NODE), DEFAULT_ORB)
        self.assertEqual(natal_orb(CelestialBody.ASCENDANT), DEFAULT_ORB)


class TestAspectCalculator(unittest.TestCase):
    def setUp(self):
        self.calculator = AspectCalculator()

    def test_square_within_personal_orb(self):
        aspects = self.calculator.calculate([
            point(CelestialBody.MERCURY, 10.0),
            point(CelestialBody.MARS, 105.0),
        ])

        self.assertEqual(len(aspects), 1)
        aspect = aspects[0]
        self.assertEqual(aspect.aspect_type, AspectType.SQUARE)
        self.assertAlmostEqual(aspect.separation, 95.0)
        self.assertAlmostEqual(aspect.orb, 5.0)
        self.assertIsNone(aspect.is_applying)
        self.assertEqual(aspect.id, "Mercury-Mars-Square")

    def test_pair_uses_tighter_orb(self):
        # Sun allows 8, Saturn only 5
        aspects = self.calculator.calculate([
            point(CelestialBody.SUN, 0.0),
            point(CelestialBody.SATURN, 126.0),
        ])
        self.assertEqual(aspects, [])

        aspects = self.calculator.calculate([
            point(CelestialBody.SUN, 0.0),
            point(CelestialBody.MOON, 127.0),
        ])
        self.assertEqual(aspects[0].aspect_type, AspectType.TRINE)

    def test_orb_boundary_is_inclusive(self):
        aspects = self.calculator.calculate([
            point(CelestialBody.JUPITER, 0.0),
            point(CelestialBody.SATURN, 185.0),
        ])
        self.assertEqual(aspects[0].aspect_type, AspectType.OPPOSITION)
        self.assertAlmostEqual(aspects[0].orb, 5.0)

    def test_separation_wraps_around_aries(self):
        aspects = self.calculator.calculate([
            point(CelestialBody.SUN, 358.0),
            point(CelestialBody.MOON, 3.0),
        ])
        self.assertEqual(aspects[0].aspect_type, AspectType.CONJUNCTION)
        self.assertAlmostEqual(aspects[0].separation, 5.0)

    def test_pairs_follow_input_order(self):
        aspects = self.calculator.calculate([
            point(CelestialBody.SUN, 0.0),
            point(CelestialBody.MOON, 90.0),
            point(CelestialBody.MARS, 180.0),
        ])

        self.assertEqual(
            [(a.body1, a.body2) for a in aspects],
            [
                (CelestialBody.SUN, CelestialBody.MOON),
                (CelestialBody.SUN, CelestialBody.MARS),
                (CelestialBody.MOON, CelestialBody.MARS),
            ],
        )
        self.assertEqual(
            [a.aspect_type for a in aspects],
            [AspectType.SQUARE, AspectType.OPPOSITION, AspectType.SQUARE],
        )

    def test_one_aspect_per_pair(self):
        points = [point(body, i * 37.0) for i, body in enumerate([
            CelestialBody.SUN,
            CelestialBody.MOON,
            CelestialBody.MERCURY,
            CelestialBody.VENUS,
            CelestialBody.MARS,
        ])]
        aspects = self.calculator.calculate(points)
        pairs = [(a.body1, a.body2) for a in aspects]
        self.assertEqual(len(pairs), len(set(pairs)))

    def test_no_points(self):
        self.assertEqual(self.calculator.calculate([]), [])


if __name__ == "__main__":
    unittest.main()
