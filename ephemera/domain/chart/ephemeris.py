import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Tuple, TypeVar

import swisseph as swe

from ephemera.domain.chart.errors import EphemerisError
from ephemera.domain.chart.schemas import PlanetaryPosition
from ephemera.domain.chart.zodiac import PLANETS, CelestialBody, normalize_longitude, opposite

logger = logging.getLogger(__name__)

J2000 = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
J2000_JD = 2451545.0

T = TypeVar("T")


@dataclass(frozen=True)
class HouseCusps:
    """
    Raw angle and cusp longitudes for one instant and place.

    `cusps[0]` is the cusp of house 1.
    """
    ascendant: float
    midheaven: float
    cusps: Tuple[float, ...]


class EphemerisProvider(ABC):
    """
    Source of raw ecliptic longitudes.

    Implementations must be read-only: the engine may call them from
    several threads at once. Instants are timezone-aware datetimes.

    Failures should be raised as EphemerisError. Any other exception
    (timeouts, connection errors of a remote source) is converted to
    EphemerisError by `call_provider`.
    """

    @abstractmethod
    def position(self, body: CelestialBody, instant: datetime) -> Tuple[float, float]:
        """
        Return (longitude_degrees, longitude_speed) for a planet.

        Raises EphemerisError when the position is unavailable.
        """

    @abstractmethod
    def node(self, is_north: bool, instant: datetime, use_true_node: bool = True) -> float:
        """
        Return the longitude of the lunar node.

        Raises EphemerisError when the position is unavailable.
        """

    @abstractmethod
    def house_cusps(
        self,
        instant: datetime,
        latitude: float,
        longitude: float,
    ) -> Optional[HouseCusps]:
        """
        Return Placidus angles and cusps, or None where the
        system is undefined (polar latitudes).

        Raises EphemerisError when the data source fails.
        """


# ─────────────────────────────────────────────
# Time helpers
# ─────────────────────────────────────────────

def to_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        raise ValueError("Ephemeris instants must be timezone-aware")
    return instant.astimezone(timezone.utc)


def julian_day(instant: datetime) -> float:
    """
    UT Julian day of an aware datetime (proleptic Gregorian).
    """
    delta = to_utc(instant) - J2000
    return J2000_JD + delta.total_seconds() / 86400.0


# ─────────────────────────────────────────────
# Position assembly
# ─────────────────────────────────────────────

def call_provider(what: str, fn: Callable[..., T], *args: Any) -> T:
    """
    Run one provider query, re-raising any failure as EphemerisError.
    """
    try:
        return fn(*args)
    except EphemerisError:
        raise
    except Exception as e:
        logger.error(f"Ephemeris provider failed for {what}: {e!r}")
        raise EphemerisError(f"Ephemeris unavailable for {what}: {e}") from e


def planet_position(
    provider: EphemerisProvider,
    body: CelestialBody,
    instant: datetime,
) -> PlanetaryPosition:
    longitude, speed = call_provider(body.value, provider.position, body, instant)
    return PlanetaryPosition.from_longitude(
        body,
        longitude,
        is_retrograde=speed < 0,
    )


def node_positions(
    provider: EphemerisProvider,
    instant: datetime,
    use_true_node: bool = True,
) -> List[PlanetaryPosition]:
    """
    North and South Node; both are reported retrograde by convention.
    """
    north = normalize_longitude(
        call_provider("lunar node", provider.node, True, instant, use_true_node)
    )
    return [
        PlanetaryPosition.from_longitude(CelestialBody.NORTH_NODE, north, is_retrograde=True),
        PlanetaryPosition.from_longitude(CelestialBody.SOUTH_NODE, opposite(north), is_retrograde=True),
    ]


def all_positions(
    provider: EphemerisProvider,
    instant: datetime,
    use_true_node: bool = True,
) -> List[PlanetaryPosition]:
    """
    The ten planets in fixed order followed by North and South Node.
    """
    positions = [planet_position(provider, body, instant) for body in PLANETS]
    positions.extend(node_positions(provider, instant, use_true_node))
    return positions


# ─────────────────────────────────────────────
# Swiss Ephemeris
# ─────────────────────────────────────────────

class SwissEphemerisProvider(EphemerisProvider):
    """
    Tropical positions and Placidus houses from pyswisseph.

    Falls back to the built-in Moshier ephemeris when no data files
    are found under `ephe_path`.
    """

    PLANET_MAPPING = {
        CelestialBody.SUN: swe.SUN,
        CelestialBody.MOON: swe.MOON,
        CelestialBody.MERCURY: swe.MERCURY,
        CelestialBody.VENUS: swe.VENUS,
        CelestialBody.MARS: swe.MARS,
        CelestialBody.JUPITER: swe.JUPITER,
        CelestialBody.SATURN: swe.SATURN,
        CelestialBody.URANUS: swe.URANUS,
        CelestialBody.NEPTUNE: swe.NEPTUNE,
        CelestialBody.PLUTO: swe.PLUTO,
    }

    HOUSE_SYSTEM = b"P"

    def __init__(self, ephe_path: Optional[str] = None):
        if ephe_path:
            swe.set_ephe_path(ephe_path)
        self.flags = swe.FLG_SWIEPH | swe.FLG_SPEED

    def position(self, body: CelestialBody, instant: datetime) -> Tuple[float, float]:
        if body not in self.PLANET_MAPPING:
            raise ValueError(f"{body.value} is not a planet")

        jd = julian_day(instant)
        try:
            res = swe.calc_ut(jd, self.PLANET_MAPPING[body], self.flags)
        except swe.Error as e:
            logger.error(f"Swiss Ephemeris failed for {body.value} at JD {jd}: {e}")
            raise EphemerisError(f"Ephemeris unavailable for {body.value}: {e}") from e

        lon = res[0][0]
        speed = res[0][3]
        return normalize_longitude(lon), speed

    def node(self, is_north: bool, instant: datetime, use_true_node: bool = True) -> float:
        jd = julian_day(instant)
        node_id = swe.TRUE_NODE if use_true_node else swe.MEAN_NODE
        try:
            res = swe.calc_ut(jd, node_id, self.flags)
        except swe.Error as e:
            logger.error(f"Swiss Ephemeris failed for lunar node at JD {jd}: {e}")
            raise EphemerisError(f"Ephemeris unavailable for lunar node: {e}") from e

        north = normalize_longitude(res[0][0])
        return north if is_north else opposite(north)

    def house_cusps(
        self,
        instant: datetime,
        latitude: float,
        longitude: float,
    ) -> Optional[HouseCusps]:
        jd = julian_day(instant)

        # Placidus has no solution inside the polar circles
        if abs(latitude) >= 90.0 - self._obliquity(jd):
            logger.warning(f"Placidus undefined at latitude {latitude}; skipping houses")
            return None

        try:
            cusps, ascmc = swe.houses(jd, latitude, longitude, self.HOUSE_SYSTEM)
        except swe.Error as e:
            logger.warning(f"Placidus cusps failed at latitude {latitude}: {e}")
            return None

        return HouseCusps(
            ascendant=normalize_longitude(ascmc[0]),
            midheaven=normalize_longitude(ascmc[1]),
            cusps=tuple(normalize_longitude(c) for c in cusps[:12]),
        )

    def _obliquity(self, jd: float) -> float:
        try:
            res = swe.calc_ut(jd, swe.ECL_NUT, 0)
        except swe.Error as e:
            raise EphemerisError(f"Ephemeris unavailable for obliquity: {e}") from e
        return res[0][0]
