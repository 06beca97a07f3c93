import dataclasses
import logging
from typing import Any, Dict, Optional

from ephemera.domain.chart.converters import chart_to_persistence
from ephemera.domain.chart.engine import ChartEngine
from ephemera.domain.chart.schemas import ChartInput, ChartResult
from ephemera.services.location_service import LocationService

logger = logging.getLogger(__name__)


class ChartService:
    """
    Orchestrates place resolution and chart generation.

    Used by:
    - Charts API
    """

    def __init__(
        self,
        engine: ChartEngine,
        location_service: Optional[LocationService] = None,
    ):
        self.engine = engine
        self.location_service = location_service

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    async def create_chart(self, chart_input: ChartInput) -> ChartResult:
        """
        Geocode the birth place if needed, then compute the chart.

        An unresolved place yields a `needs_geocoding` result, not an error.
        """
        chart_input = await self._resolve_place(chart_input)
        result = self.engine.compute_chart(chart_input)
        logger.info(
            f"Chart for {chart_input.name or 'anonymous'}: "
            f"status={result.status.value} type={result.chart_type.value if result.chart_type else None}"
        )
        return result

    def to_record(self, result: ChartResult) -> Dict[str, Any]:
        """
        Storable form of an `ok` chart.
        """
        return chart_to_persistence(result)

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    async def _resolve_place(self, chart_input: ChartInput) -> ChartInput:
        if not chart_input.birth_place or chart_input.has_resolved_place:
            return chart_input
        if self.location_service is None:
            return chart_input

        match = await self.location_service.resolve_place(chart_input.birth_place)
        if match is None:
            return chart_input

        return dataclasses.replace(
            chart_input,
            latitude=chart_input.latitude if chart_input.latitude is not None else match["latitude"],
            longitude=chart_input.longitude if chart_input.longitude is not None else match["longitude"],
            timezone=chart_input.timezone or match["timezone"],
        )
