from typing import List, Optional

from ephemera.domain.chart.schemas import EvolutionaryCore, PlanetaryPosition
from ephemera.domain.chart.zodiac import CelestialBody, ChartType, ZodiacSign

NOTE_HOUSE_SYSTEM = "Placidus houses used"
NOTE_HOUSES_OMITTED = "Houses omitted when birth time/place unknown"
NOTE_MOON_UNCERTAIN = "Moon sign uncertain - may change during birth date"


class EvolutionaryCoreBuilder:
    """
    Extracts the nodal axis, Pluto and the luminaries with data-quality notes.
    """

    def build(
        self,
        planets: List[PlanetaryPosition],
        rising_sign: Optional[ZodiacSign],
        chart_type: ChartType,
    ) -> EvolutionaryCore:
        by_body = {}
        for planet in planets:
            by_body.setdefault(planet.body, planet)

        moon = by_body.get(CelestialBody.MOON)

        notes = [NOTE_HOUSE_SYSTEM]
        if chart_type != ChartType.FULL_NATAL:
            notes.append(NOTE_HOUSES_OMITTED)
        if moon is not None and moon.sign_uncertain:
            notes.append(NOTE_MOON_UNCERTAIN)

        return EvolutionaryCore(
            pluto=by_body.get(CelestialBody.PLUTO),
            north_node=by_body.get(CelestialBody.NORTH_NODE),
            south_node=by_body.get(CelestialBody.SOUTH_NODE),
            moon=moon,
            sun=by_body.get(CelestialBody.SUN),
            rising_sign=rising_sign,
            notes=notes,
        )
