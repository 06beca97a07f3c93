from datetime import date, time
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ephemera.api.dependencies import get_chart_service
from ephemera.config import settings
from ephemera.domain.chart.schemas import ChartInput, ChartResult
from ephemera.domain.chart.zodiac import NodeType
from ephemera.services.chart_service import ChartService


router = APIRouter()


# ─────────────────────────────────────────────
# Request Schema
# ─────────────────────────────────────────────

class ChartCreateRequest(BaseModel):
    name: Optional[str] = Field(default=None, examples=["Ada"])
    birth_date: date = Field(..., examples=["1990-06-15"])
    birth_time: Optional[time] = Field(default=None, examples=["14:30"])
    birth_time_unknown: bool = False
    birth_place: Optional[str] = Field(default=None, examples=["London, England, United Kingdom"])
    latitude: Optional[float] = Field(default=None, examples=[51.5074])
    longitude: Optional[float] = Field(default=None, examples=[-0.1278])
    timezone: Optional[str] = Field(default=None, examples=["Europe/London"])
    node_type: NodeType = NodeType(settings.DEFAULT_NODE_TYPE)

    def to_input(self) -> ChartInput:
        return ChartInput(
            birth_date=self.birth_date,
            birth_time=self.birth_time,
            birth_time_unknown=self.birth_time_unknown,
            birth_place=self.birth_place,
            latitude=self.latitude,
            longitude=self.longitude,
            timezone=self.timezone,
            node_type=self.node_type,
            name=self.name,
        )


# ─────────────────────────────────────────────
# Route
# ─────────────────────────────────────────────

@router.post(
    "/charts",
    response_model=ChartResult,
    summary="Compute a natal chart from birth details",
)
async def create_chart(
    payload: ChartCreateRequest,
    service: ChartService = Depends(get_chart_service),
):
    """
    Compute a natal chart.

    The response `status` is authoritative: only `ok` charts are complete.
    `needs_geocoding` means the birth place could not be resolved.
    """
    return await service.create_chart(payload.to_input())
