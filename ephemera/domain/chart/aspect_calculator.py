from typing import List

from ephemera.domain.chart.schemas import ChartAspect, PlanetaryPosition
from ephemera.domain.chart.zodiac import CelestialBody, angular_separation, match_aspect


# Orb by point category; a pair uses the tighter of its two orbs
LUMINARY_ORB = 8.0
PERSONAL_ORB = 6.0
DEFAULT_ORB = 5.0


def natal_orb(body: CelestialBody) -> float:
    if body in (CelestialBody.SUN, CelestialBody.MOON):
        return LUMINARY_ORB
    if body in (CelestialBody.MERCURY, CelestialBody.VENUS, CelestialBody.MARS):
        return PERSONAL_ORB
    return DEFAULT_ORB


class AspectCalculator:
    """
    Pairwise major aspects between chart points.

    At most one aspect is reported per pair: the five aspect angles are
    tried in ascending order and the first within orb wins. Pairs are
    visited as (i, j) with i < j, so the output order follows the input.
    """

    def calculate(self, points: List[PlanetaryPosition]) -> List[ChartAspect]:
        aspects: List[ChartAspect] = []

        for i in range(len(points)):
            for j in range(i + 1, len(points)):
                first = points[i]
                second = points[j]

                orb = min(natal_orb(first.body), natal_orb(second.body))
                separation = angular_separation(first.longitude, second.longitude)

                match = match_aspect(separation, orb)
                if match is None:
                    continue

                aspect_type, deviation = match
                aspects.append(
                    ChartAspect(
                        body1=first.body,
                        body2=second.body,
                        aspect_type=aspect_type,
                        separation=separation,
                        orb=deviation,
                        # No speed-based direction in natal aspects
                        is_applying=None,
                    )
                )

        return aspects
