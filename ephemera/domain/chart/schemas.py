from dataclasses import dataclass
from datetime import date, datetime, time
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ephemera.domain.chart.zodiac import (
    AspectType,
    CelestialBody,
    ChartStatus,
    ChartType,
    NodeType,
    ZodiacSign,
    degree_in_sign,
    normalize_longitude,
)


# ─────────────────────────────────────────────
# Input
# ─────────────────────────────────────────────

@dataclass(frozen=True)
class ChartInput:
    """
    Immutable birth input used for chart calculation.

    `birth_time` is ignored whenever `birth_time_unknown` is set.
    """
    birth_date: date
    birth_time: Optional[time] = None
    birth_time_unknown: bool = False
    birth_place: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timezone: Optional[str] = None
    node_type: NodeType = NodeType.TRUE
    name: Optional[str] = None

    @property
    def has_exact_time(self) -> bool:
        return self.birth_time is not None and not self.birth_time_unknown

    @property
    def has_resolved_place(self) -> bool:
        return (
            self.latitude is not None
            and self.longitude is not None
            and bool(self.timezone)
        )


# ─────────────────────────────────────────────
# Core Atomic Schemas
# ─────────────────────────────────────────────

class PlanetaryPosition(BaseModel):
    """
    Represents a single point's placement on the ecliptic.
    """
    model_config = ConfigDict(frozen=True)

    body: CelestialBody
    longitude: float = Field(..., ge=0.0, lt=360.0)
    sign: ZodiacSign
    degree_in_sign: float = Field(..., ge=0.0, lt=30.0)
    house: Optional[int] = Field(default=None, ge=1, le=12)
    is_retrograde: bool = False
    sign_uncertain: bool = False
    possible_signs: Optional[List[ZodiacSign]] = None

    @classmethod
    def from_longitude(
        cls,
        body: CelestialBody,
        longitude: float,
        *,
        is_retrograde: bool = False,
        house: Optional[int] = None,
    ) -> "PlanetaryPosition":
        """
        Build a position whose sign and degree are derived from the longitude.
        """
        lon = normalize_longitude(longitude)
        return cls(
            body=body,
            longitude=lon,
            sign=ZodiacSign.from_longitude(lon),
            degree_in_sign=degree_in_sign(lon),
            house=house,
            is_retrograde=is_retrograde,
        )

    @property
    def formatted_degree(self) -> str:
        degrees = int(self.degree_in_sign)
        minutes = int((self.degree_in_sign - degrees) * 60)
        return f"{degrees}°{minutes:02d}'"

    @property
    def full_description(self) -> str:
        desc = f"{self.sign.symbol} {self.formatted_degree}"
        if self.is_retrograde:
            desc += " ℞"
        return desc


class House(BaseModel):
    """
    Represents a house cusp (Placidus).
    """
    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=1, le=12)
    sign: ZodiacSign
    cusp_degree: float


class ChartAngles(BaseModel):
    """
    The four cardinal points of the chart.
    """
    model_config = ConfigDict(frozen=True)

    ascendant: PlanetaryPosition
    midheaven: PlanetaryPosition
    descendant: PlanetaryPosition
    imum_coeli: PlanetaryPosition


class ChartAspect(BaseModel):
    """
    An aspect between an unordered pair of chart points.
    """
    model_config = ConfigDict(frozen=True)

    body1: CelestialBody
    body2: CelestialBody
    aspect_type: AspectType
    separation: float
    orb: float
    is_applying: Optional[bool] = None

    @property
    def id(self) -> str:
        return f"{self.body1.value}-{self.body2.value}-{self.aspect_type.value}"


# ─────────────────────────────────────────────
# Chart Metadata & Evolutionary Core
# ─────────────────────────────────────────────

class ChartMetadata(BaseModel):
    """
    Records the inputs and assumptions that produced a chart.
    """
    model_config = ConfigDict(frozen=True)

    birth_date: date
    birth_time_input: Optional[str] = None
    birth_place_input: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timezone: Optional[str] = None
    house_system: str = "PLACIDUS"
    house_assignment: str = "WHOLE_SIGN"
    node_type: NodeType = NodeType.TRUE
    utc_datetime_used: Optional[datetime] = None
    julian_day: Optional[float] = None
    assumptions: List[str] = Field(default_factory=list)


class EvolutionaryCore(BaseModel):
    """
    Curated view on the nodal axis, Pluto and the luminaries.
    """
    model_config = ConfigDict(frozen=True)

    pluto: Optional[PlanetaryPosition] = None
    north_node: Optional[PlanetaryPosition] = None
    south_node: Optional[PlanetaryPosition] = None
    moon: Optional[PlanetaryPosition] = None
    sun: Optional[PlanetaryPosition] = None
    rising_sign: Optional[ZodiacSign] = None
    notes: List[str] = Field(default_factory=list)


# ─────────────────────────────────────────────
# Chart Result
# ─────────────────────────────────────────────

class ChartResult(BaseModel):
    """
    Full output of one chart computation.

    Only `ok` results are complete charts; `needs_geocoding` and
    `error` results carry diagnostics in `errors` and no chart data.
    """
    model_config = ConfigDict(frozen=True)

    status: ChartStatus
    errors: List[str] = Field(default_factory=list)
    chart_type: Optional[ChartType] = None
    metadata: Optional[ChartMetadata] = None
    angles: Optional[ChartAngles] = None
    houses: Optional[List[House]] = None
    planets: Optional[List[PlanetaryPosition]] = None
    aspects: Optional[List[ChartAspect]] = None
    evolutionary_core: Optional[EvolutionaryCore] = None

    @classmethod
    def failure(cls, status: ChartStatus, errors: List[str]) -> "ChartResult":
        return cls(status=status, errors=errors)

    @property
    def is_ok(self) -> bool:
        return self.status == ChartStatus.OK

    def position(self, body: CelestialBody) -> Optional[PlanetaryPosition]:
        for planet in self.planets or []:
            if planet.body == body:
                return planet
        return None

    @property
    def sun_sign(self) -> Optional[ZodiacSign]:
        sun = self.position(CelestialBody.SUN)
        return sun.sign if sun else None

    @property
    def moon_sign(self) -> Optional[ZodiacSign]:
        moon = self.position(CelestialBody.MOON)
        return moon.sign if moon else None

    @property
    def rising_sign(self) -> Optional[ZodiacSign]:
        return self.angles.ascendant.sign if self.angles else None

    @property
    def big_three(self) -> Tuple[Optional[ZodiacSign], Optional[ZodiacSign], Optional[ZodiacSign]]:
        return self.sun_sign, self.moon_sign, self.rising_sign
