import hashlib
from datetime import datetime, timezone
from typing import Iterable, Optional, Union
from uuid import UUID

from ephemera.domain.chart.schemas import PlanetaryPosition


class CacheKeys:
    """
    Centralized cache key builders.
    """

    # ─────────────────────────────────────────────
    # Transits
    # ─────────────────────────────────────────────

    @staticmethod
    def natal_hash(natal_positions: Iterable[PlanetaryPosition]) -> str:
        payload = ";".join(f"{p.body.value}@{p.longitude:.6f}" for p in natal_positions)
        return hashlib.sha256(payload.encode()).hexdigest()[:16]

    @staticmethod
    def transit(
        chart_id: Union[UUID, str],
        natal_hash: str,
        at: datetime,
        limit: Optional[int] = None,
        exact: bool = False,
    ) -> str:
        # Live queries share one bucket per UTC hour; explicit instants are keyed exactly
        utc = at.astimezone(timezone.utc)
        stamp = utc.strftime("%Y%m%dT%H%M%S.%f") if exact else utc.strftime("%Y%m%dT%H")
        scope = "all" if limit is None else f"top{limit}"
        return f"ephemera:transit:{chart_id}:{natal_hash}:{stamp}:{scope}"

    @staticmethod
    def transit_pattern(chart_id: Union[UUID, str]) -> str:
        return f"ephemera:transit:{chart_id}:*"
