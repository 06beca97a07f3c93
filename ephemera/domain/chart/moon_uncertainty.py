from dataclasses import dataclass
from datetime import datetime, time, timezone, tzinfo
from typing import List, Optional

from ephemera.domain.chart.birth_moment import combine_local
from ephemera.domain.chart.ephemeris import EphemerisProvider, planet_position
from ephemera.domain.chart.schemas import PlanetaryPosition
from ephemera.domain.chart.zodiac import CelestialBody, ZodiacSign

START_OF_DAY = time(0, 0, 0)
END_OF_DAY = time(23, 59, 59)


@dataclass(frozen=True)
class MoonUncertainty:
    is_uncertain: bool
    possible_signs: List[ZodiacSign]


class MoonUncertaintyChecker:
    """
    Detects a Moon ingress during the local birth day.
    """

    def __init__(self, provider: EphemerisProvider):
        self.provider = provider

    def check(self, instant: datetime, tz: Optional[tzinfo] = None) -> MoonUncertainty:
        tz = tz or timezone.utc
        local_day = instant.astimezone(tz).date()

        start = planet_position(
            self.provider, CelestialBody.MOON, combine_local(local_day, START_OF_DAY, tz)
        )
        end = planet_position(
            self.provider, CelestialBody.MOON, combine_local(local_day, END_OF_DAY, tz)
        )

        if start.sign == end.sign:
            return MoonUncertainty(is_uncertain=False, possible_signs=[start.sign])
        return MoonUncertainty(is_uncertain=True, possible_signs=[start.sign, end.sign])

    def apply(
        self,
        planets: List[PlanetaryPosition],
        uncertainty: MoonUncertainty,
    ) -> List[PlanetaryPosition]:
        """
        Flag the Moon entry; its sign stays the one at the calculation instant.
        """
        updated = []
        for planet in planets:
            if planet.body == CelestialBody.MOON:
                planet = planet.model_copy(update={
                    "sign_uncertain": uncertainty.is_uncertain,
                    "possible_signs": (
                        list(uncertainty.possible_signs) if uncertainty.is_uncertain else None
                    ),
                })
            updated.append(planet)
        return updated
