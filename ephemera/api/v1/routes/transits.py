from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from ephemera.api.dependencies import get_transit_service
from ephemera.config import settings
from ephemera.domain.chart.errors import TransitCalculationError
from ephemera.domain.chart.schemas import PlanetaryPosition
from ephemera.domain.transits.schemas import TransitReport
from ephemera.services.transit_service import TransitService


router = APIRouter()


# ─────────────────────────────────────────────
# Request Schema
# ─────────────────────────────────────────────

class TransitRequest(BaseModel):
    natal_positions: List[PlanetaryPosition]
    chart_id: Optional[str] = Field(
        default=None,
        description="Stable chart identifier; enables result caching",
    )
    at: Optional[datetime] = Field(
        default=None,
        description="Query instant; defaults to now (UTC)",
    )
    limit: Optional[int] = Field(
        default=settings.TRANSIT_TOP_N,
        ge=0,
        description="Number of transits to return; null returns all",
    )


# ─────────────────────────────────────────────
# Route
# ─────────────────────────────────────────────

@router.post(
    "/transits",
    response_model=TransitReport,
    summary="Rank current transits against natal positions",
)
async def get_transits(
    payload: TransitRequest,
    service: TransitService = Depends(get_transit_service),
):
    """
    Transits to a stored natal chart, most significant first.
    """
    try:
        return await service.get_current(
            natal_positions=payload.natal_positions,
            chart_id=payload.chart_id,
            timestamp=payload.at,
            limit=payload.limit,
        )
    except TransitCalculationError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Ephemeris unavailable: {e}",
        )
