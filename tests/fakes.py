from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from ephemera.domain.chart.ephemeris import EphemerisProvider, HouseCusps
from ephemera.domain.chart.errors import EphemerisError
from ephemera.domain.chart.zodiac import CelestialBody, normalize_longitude


DEFAULT_LONGITUDES = {
    CelestialBody.SUN: 84.0,        # Gemini
    CelestialBody.MOON: 200.0,      # Libra
    CelestialBody.MERCURY: 70.0,    # Gemini
    CelestialBody.VENUS: 45.0,      # Taurus
    CelestialBody.MARS: 5.0,        # Aries
    CelestialBody.JUPITER: 100.0,   # Cancer
    CelestialBody.SATURN: 293.0,    # Capricorn
    CelestialBody.URANUS: 278.0,    # Capricorn
    CelestialBody.NEPTUNE: 284.0,   # Capricorn
    CelestialBody.PLUTO: 225.0,     # Scorpio
}

DEFAULT_SPEEDS = {
    CelestialBody.SATURN: -0.05,
    CelestialBody.URANUS: -0.03,
    CelestialBody.NEPTUNE: -0.02,
}

DEFAULT_CUSPS = HouseCusps(
    ascendant=215.0,                # Scorpio
    midheaven=130.0,                # Leo
    cusps=tuple(normalize_longitude(215.0 + 30.0 * i) for i in range(12)),
)


class FakeEphemerisProvider(EphemerisProvider):
    """
    Deterministic in-memory ephemeris for tests.

    Longitudes are fixed per body unless a callable is given, in which
    case it receives the query instant.
    """

    def __init__(
        self,
        longitudes: Optional[Dict[CelestialBody, float]] = None,
        speeds: Optional[Dict[CelestialBody, float]] = None,
        north_node: float = 310.0,
        mean_north_node: float = 311.5,
        cusps: Optional[HouseCusps] = DEFAULT_CUSPS,
        moon: Optional[Callable[[datetime], float]] = None,
        fail: bool = False,
        error: Optional[Exception] = None,
    ):
        self.longitudes = dict(DEFAULT_LONGITUDES)
        self.longitudes.update(longitudes or {})
        self.speeds = dict(DEFAULT_SPEEDS)
        self.speeds.update(speeds or {})
        self.north_node = north_node
        self.mean_north_node = mean_north_node
        self.cusps = cusps
        self.moon = moon
        self.fail = fail
        self.error = error
        self.calls: List[Tuple[str, object, datetime]] = []

    def position(self, body: CelestialBody, instant: datetime) -> Tuple[float, float]:
        self.calls.append(("position", body, instant))
        if self.fail:
            raise EphemerisError("ephemeris data missing for requested range")
        if self.error is not None:
            raise self.error
        if body == CelestialBody.MOON and self.moon is not None:
            return normalize_longitude(self.moon(instant)), 13.0
        return self.longitudes[body], self.speeds.get(body, 1.0)

    def node(self, is_north: bool, instant: datetime, use_true_node: bool = True) -> float:
        self.calls.append(("node", is_north, instant))
        if self.fail:
            raise EphemerisError("ephemeris data missing for requested range")
        if self.error is not None:
            raise self.error
        north = self.north_node if use_true_node else self.mean_north_node
        return north if is_north else normalize_longitude(north + 180.0)

    def house_cusps(
        self,
        instant: datetime,
        latitude: float,
        longitude: float,
    ) -> Optional[HouseCusps]:
        self.calls.append(("house_cusps", (latitude, longitude), instant))
        if self.fail:
            raise EphemerisError("ephemeris data missing for requested range")
        if self.error is not None:
            raise self.error
        if abs(latitude) >= 66.5:
            return None
        return self.cusps
