import logging
from datetime import datetime
from typing import List, Optional, Tuple

from ephemera.domain.chart.ephemeris import EphemerisProvider, call_provider
from ephemera.domain.chart.schemas import ChartAngles, House, PlanetaryPosition
from ephemera.domain.chart.zodiac import CelestialBody, ZodiacSign, opposite

logger = logging.getLogger(__name__)


def whole_sign_house(planet_sign: ZodiacSign, rising_sign: ZodiacSign) -> int:
    """
    House number counted by sign from the rising sign (1-12).
    """
    return ((planet_sign.ordinal - rising_sign.ordinal + 12) % 12) + 1


class HouseAnglesCalculator:
    """
    Derives angles and Placidus cusps, and places planets in houses.

    Houses are assigned by whole-sign offset from the Ascendant's sign,
    not by containment between cusp degrees. The cusp degrees are still
    exposed on each House for display.
    """

    def __init__(self, provider: EphemerisProvider):
        self.provider = provider

    def calculate(
        self,
        instant: datetime,
        latitude: float,
        longitude: float,
    ) -> Optional[Tuple[ChartAngles, List[House]]]:
        """
        Return (angles, houses), or None when the provider cannot
        produce Placidus cusps at this latitude.
        """
        raw = call_provider(
            "house cusps", self.provider.house_cusps, instant, latitude, longitude
        )
        if raw is None:
            logger.warning(f"No house cusps for latitude {latitude}; chart will omit houses")
            return None

        angles = ChartAngles(
            ascendant=PlanetaryPosition.from_longitude(
                CelestialBody.ASCENDANT, raw.ascendant, house=1
            ),
            midheaven=PlanetaryPosition.from_longitude(
                CelestialBody.MIDHEAVEN, raw.midheaven, house=10
            ),
            descendant=PlanetaryPosition.from_longitude(
                CelestialBody.DESCENDANT, opposite(raw.ascendant), house=7
            ),
            imum_coeli=PlanetaryPosition.from_longitude(
                CelestialBody.IMUM_COELI, opposite(raw.midheaven), house=4
            ),
        )

        houses = [
            House(
                number=i + 1,
                sign=ZodiacSign.from_longitude(cusp),
                cusp_degree=cusp,
            )
            for i, cusp in enumerate(raw.cusps[:12])
        ]

        return angles, houses

    def assign_houses(
        self,
        planets: List[PlanetaryPosition],
        rising_sign: ZodiacSign,
    ) -> List[PlanetaryPosition]:
        return [
            planet.model_copy(update={"house": whole_sign_house(planet.sign, rising_sign)})
            for planet in planets
        ]
