import logging
from datetime import datetime, timezone
from typing import List, Optional

from ephemera.domain.chart.ephemeris import EphemerisProvider, all_positions
from ephemera.domain.chart.errors import EphemerisError, TransitCalculationError
from ephemera.domain.chart.schemas import PlanetaryPosition
from ephemera.domain.chart.zodiac import CelestialBody, angular_separation, match_aspect
from ephemera.domain.transits.schemas import TransitAspect, TransitReport
from ephemera.domain.transits.significance import significance_score

logger = logging.getLogger(__name__)

TRANSIT_ORBS = {
    CelestialBody.PLUTO: 3.0,
    CelestialBody.NEPTUNE: 3.0,
    CelestialBody.URANUS: 3.0,
    CelestialBody.SATURN: 4.0,
    CelestialBody.JUPITER: 4.0,
    CelestialBody.SUN: 5.0,
    CelestialBody.MOON: 5.0,
}
DEFAULT_TRANSIT_ORB = 3.0


def transit_orb(transiting: CelestialBody) -> float:
    """
    Orb allowed for a transiting body, whatever natal point it hits.
    """
    return TRANSIT_ORBS.get(transiting, DEFAULT_TRANSIT_ORB)


def transits_for_body(
    transits: List[TransitAspect],
    natal_body: CelestialBody,
) -> List[TransitAspect]:
    """
    Keep the transits that hit one natal point, preserving rank order.
    """
    return [t for t in transits if t.natal.body == natal_body]


class TransitEngine:
    """
    Calculates transits of current positions to a natal chart.

    This engine:
    - Is ephemeris-agnostic (provider is injected)
    - Always queries the true node
    - Ignores the South Node on both sides
    - Returns aspects ranked by significance, ties kept in
      (transiting body, natal list) order
    """

    calculation_version = "v1"

    def __init__(self, provider: EphemerisProvider):
        self.provider = provider

    def calculate(
        self,
        natal_positions: List[PlanetaryPosition],
        at: datetime,
    ) -> List[TransitAspect]:
        """
        Return every transit aspect at `at`, most significant first.

        Naive datetimes are taken as UTC.
        """
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)

        try:
            current = all_positions(self.provider, at, use_true_node=True)
        except EphemerisError as e:
            logger.error(f"Transit positions unavailable at {at.isoformat()}: {e}")
            raise TransitCalculationError(str(e)) from e

        transiting = [p for p in current if p.body != CelestialBody.SOUTH_NODE]
        natal = [p for p in natal_positions if p.body != CelestialBody.SOUTH_NODE]

        aspects: List[TransitAspect] = []
        for transit_pos in transiting:
            orb = transit_orb(transit_pos.body)
            for natal_pos in natal:
                separation = angular_separation(transit_pos.longitude, natal_pos.longitude)
                match = match_aspect(separation, orb)
                if match is None:
                    continue

                aspect_type, deviation = match
                aspects.append(
                    TransitAspect(
                        transiting=transit_pos,
                        natal=natal_pos,
                        aspect_type=aspect_type,
                        separation=separation,
                        orb=deviation,
                        significance=significance_score(
                            transit_pos.body, natal_pos.body, aspect_type, deviation
                        ),
                    )
                )

        # sorted() is stable: equal scores keep iteration order
        return sorted(aspects, key=lambda a: -a.significance)

    def top(
        self,
        natal_positions: List[PlanetaryPosition],
        at: datetime,
        limit: int = 6,
    ) -> List[TransitAspect]:
        """
        The `limit` most significant transits.
        """
        return self.calculate(natal_positions, at)[:max(limit, 0)]

    def report(
        self,
        natal_positions: List[PlanetaryPosition],
        at: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> TransitReport:
        """
        Ranked transits wrapped with their query timestamp.

        If `at` is None, current UTC time is used.
        """
        if at is None:
            at = datetime.now(timezone.utc)
        elif at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)

        transits = self.calculate(natal_positions, at)
        if limit is not None:
            transits = transits[:max(limit, 0)]

        return TransitReport(
            timestamp=at.isoformat(),
            transits=transits,
            calculation_version=self.calculation_version,
        )
