from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ephemera.domain.chart.schemas import PlanetaryPosition
from ephemera.domain.chart.zodiac import AspectType


# ─────────────────────────────────────────────
# Transit Schemas
# ─────────────────────────────────────────────

class TransitAspect(BaseModel):
    """
    An aspect from a current (transiting) position to a natal position.

    Recomputed on demand; never stored as a source of truth.
    """
    model_config = ConfigDict(frozen=True)

    transiting: PlanetaryPosition
    natal: PlanetaryPosition
    aspect_type: AspectType
    separation: float
    orb: float
    is_applying: Optional[bool] = None
    significance: int = Field(
        default=0,
        description="Ranking weight, higher is more important"
    )

    @property
    def id(self) -> str:
        return (
            f"{self.transiting.body.value}-{self.natal.body.value}-"
            f"{self.aspect_type.value}"
        )


class TransitReport(BaseModel):
    """
    Ranked transits for one query instant.
    """
    timestamp: str
    transits: List[TransitAspect]
    calculation_version: str = Field(
        default="v1",
        description="Version of transit calculation logic"
    )
