import math
from enum import Enum
from typing import List


# ─────────────────────────────────────────────
# Elements & Modalities
# ─────────────────────────────────────────────

class Element(str, Enum):
    FIRE = "Fire"
    EARTH = "Earth"
    AIR = "Air"
    WATER = "Water"


class Modality(str, Enum):
    CARDINAL = "Cardinal"
    FIXED = "Fixed"
    MUTABLE = "Mutable"


# ─────────────────────────────────────────────
# Zodiac Signs
# ─────────────────────────────────────────────

class ZodiacSign(str, Enum):
    ARIES = "Aries"
    TAURUS = "Taurus"
    GEMINI = "Gemini"
    CANCER = "Cancer"
    LEO = "Leo"
    VIRGO = "Virgo"
    LIBRA = "Libra"
    SCORPIO = "Scorpio"
    SAGITTARIUS = "Sagittarius"
    CAPRICORN = "Capricorn"
    AQUARIUS = "Aquarius"
    PISCES = "Pisces"

    @property
    def ordinal(self) -> int:
        return SIGNS.index(self)

    @property
    def symbol(self) -> str:
        return SIGN_SYMBOLS[self.ordinal]

    @property
    def element(self) -> Element:
        return (Element.FIRE, Element.EARTH, Element.AIR, Element.WATER)[self.ordinal % 4]

    @property
    def modality(self) -> Modality:
        return (Modality.CARDINAL, Modality.FIXED, Modality.MUTABLE)[self.ordinal % 3]

    @classmethod
    def from_longitude(cls, longitude: float) -> "ZodiacSign":
        return SIGNS[sign_index(longitude)]


SIGNS: List[ZodiacSign] = list(ZodiacSign)

SIGN_SYMBOLS = [
    "♈", "♉", "♊", "♋",
    "♌", "♍", "♎", "♏",
    "♐", "♑", "♒", "♓",
]


# ─────────────────────────────────────────────
# Chart Points
# ─────────────────────────────────────────────

class CelestialBody(str, Enum):
    SUN = "Sun"
    MOON = "Moon"
    MERCURY = "Mercury"
    VENUS = "Venus"
    MARS = "Mars"
    JUPITER = "Jupiter"
    SATURN = "Saturn"
    URANUS = "Uranus"
    NEPTUNE = "Neptune"
    PLUTO = "Pluto"
    NORTH_NODE = "North Node"
    SOUTH_NODE = "South Node"
    # Angle points share the position shape
    ASCENDANT = "Ascendant"
    MIDHEAVEN = "Midheaven"
    DESCENDANT = "Descendant"
    IMUM_COELI = "Imum Coeli"

    @property
    def symbol(self) -> str:
        return BODY_SYMBOLS[self]

    @property
    def is_personal(self) -> bool:
        return self in PERSONAL_BODIES

    @property
    def is_outer(self) -> bool:
        return self in OUTER_BODIES

    @property
    def is_node(self) -> bool:
        return self in (CelestialBody.NORTH_NODE, CelestialBody.SOUTH_NODE)

    @property
    def is_angle(self) -> bool:
        return self in ANGLE_BODIES


PLANETS = [
    CelestialBody.SUN,
    CelestialBody.MOON,
    CelestialBody.MERCURY,
    CelestialBody.VENUS,
    CelestialBody.MARS,
    CelestialBody.JUPITER,
    CelestialBody.SATURN,
    CelestialBody.URANUS,
    CelestialBody.NEPTUNE,
    CelestialBody.PLUTO,
]

PERSONAL_BODIES = frozenset({
    CelestialBody.SUN,
    CelestialBody.MOON,
    CelestialBody.MERCURY,
    CelestialBody.VENUS,
    CelestialBody.MARS,
})

OUTER_BODIES = frozenset({
    CelestialBody.URANUS,
    CelestialBody.NEPTUNE,
    CelestialBody.PLUTO,
})

ANGLE_BODIES = frozenset({
    CelestialBody.ASCENDANT,
    CelestialBody.MIDHEAVEN,
    CelestialBody.DESCENDANT,
    CelestialBody.IMUM_COELI,
})

BODY_SYMBOLS = {
    CelestialBody.SUN: "☉",
    CelestialBody.MOON: "☽",
    CelestialBody.MERCURY: "☿",
    CelestialBody.VENUS: "♀",
    CelestialBody.MARS: "♂",
    CelestialBody.JUPITER: "♃",
    CelestialBody.SATURN: "♄",
    CelestialBody.URANUS: "♅",
    CelestialBody.NEPTUNE: "♆",
    CelestialBody.PLUTO: "♇",
    CelestialBody.NORTH_NODE: "☊",
    CelestialBody.SOUTH_NODE: "☋",
    CelestialBody.ASCENDANT: "AC",
    CelestialBody.MIDHEAVEN: "MC",
    CelestialBody.DESCENDANT: "DC",
    CelestialBody.IMUM_COELI: "IC",
}


# ─────────────────────────────────────────────
# Aspects
# ─────────────────────────────────────────────

class AspectType(str, Enum):
    CONJUNCTION = "Conjunction"
    SEXTILE = "Sextile"
    SQUARE = "Square"
    TRINE = "Trine"
    OPPOSITION = "Opposition"

    @property
    def angle(self) -> float:
        return ASPECT_ANGLES[self]

    @property
    def symbol(self) -> str:
        return {
            AspectType.CONJUNCTION: "☌",
            AspectType.SEXTILE: "⚹",
            AspectType.SQUARE: "□",
            AspectType.TRINE: "△",
            AspectType.OPPOSITION: "☍",
        }[self]

    @property
    def is_harmonious(self) -> bool:
        # Conjunction counts as neutral-harmonious
        return self not in (AspectType.SQUARE, AspectType.OPPOSITION)


# Order matters: matching stops at the first aspect within orb
ASPECT_ANGLES = {
    AspectType.CONJUNCTION: 0.0,
    AspectType.SEXTILE: 60.0,
    AspectType.SQUARE: 90.0,
    AspectType.TRINE: 120.0,
    AspectType.OPPOSITION: 180.0,
}


# ─────────────────────────────────────────────
# Chart classification
# ─────────────────────────────────────────────

class ChartType(str, Enum):
    FULL_NATAL = "FULL_NATAL"
    NOON_CHART_NO_HOUSES = "NOON_CHART_NO_HOUSES"
    SIGN_BASED_NO_HOUSES = "SIGN_BASED_NO_HOUSES"


class ChartStatus(str, Enum):
    OK = "ok"
    NEEDS_GEOCODING = "needs_geocoding"
    ERROR = "error"


class NodeType(str, Enum):
    TRUE = "true"
    MEAN = "mean"


# ─────────────────────────────────────────────
# Longitude arithmetic
# ─────────────────────────────────────────────

def normalize_longitude(longitude: float) -> float:
    """
    Bring any longitude into [0, 360).
    """
    value = longitude % 360.0
    # -1e-17 % 360 rounds to 360.0
    return 0.0 if value >= 360.0 else value


def sign_index(longitude: float) -> int:
    return int(math.floor(normalize_longitude(longitude) / 30.0)) % 12


def degree_in_sign(longitude: float) -> float:
    return normalize_longitude(longitude) % 30.0


def opposite(longitude: float) -> float:
    return normalize_longitude(longitude + 180.0)


def angular_separation(first: float, second: float) -> float:
    """
    Shortest arc between two longitudes, in [0, 180].
    """
    diff = abs(first - second)
    if diff > 180.0:
        diff = 360.0 - diff
    return diff


def match_aspect(separation: float, orb: float):
    """
    Return (aspect_type, deviation) for the first aspect whose exact
    angle lies within `orb` of `separation`, or None.
    """
    for aspect_type, angle in ASPECT_ANGLES.items():
        deviation = abs(separation - angle)
        if deviation <= orb:
            return aspect_type, deviation
    return None
