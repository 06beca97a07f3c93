from typing import Any, Dict

from ephemera.domain.chart.errors import InvalidChartStateError
from ephemera.domain.chart.schemas import ChartResult
from ephemera.domain.chart.zodiac import ChartStatus


# ─────────────────────────────────────────────
# Domain → Storage
# ─────────────────────────────────────────────

def chart_to_persistence(chart: ChartResult) -> Dict[str, Any]:
    """
    Convert a complete chart into a JSON-safe nested mapping.

    Every field is kept, nulls included, so a planet with no house
    stays distinguishable from any house number.
    """
    if chart.status != ChartStatus.OK:
        raise InvalidChartStateError(
            f"Only ok charts can be stored (status={chart.status.value})"
        )

    return chart.model_dump(mode="json")


# ─────────────────────────────────────────────
# Storage → Domain
# ─────────────────────────────────────────────

def chart_from_persistence(data: Dict[str, Any]) -> ChartResult:
    """
    Rebuild a ChartResult from its stored mapping.
    """
    return ChartResult.model_validate(data)
