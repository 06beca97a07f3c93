import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone, tzinfo
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ephemera.domain.chart.schemas import ChartInput
from ephemera.domain.chart.zodiac import ChartType

logger = logging.getLogger(__name__)

LOCAL_NOON = time(12, 0, 0)

ASSUMPTION_LOCAL_NOON = "Birth time unknown; using local noon (12:00)"
ASSUMPTION_DATE_ONLY_LOCAL_NOON = "Birth time/place unknown; using local noon"
ASSUMPTION_DATE_ONLY_UTC_NOON = "Birth time/place unknown; no timezone for local noon, using 12:00 UTC"


@dataclass(frozen=True)
class BirthMoment:
    """
    The single instant used for every ephemeris query of a chart.
    """
    instant: datetime
    assumptions: List[str] = field(default_factory=list)

    @property
    def utc(self) -> datetime:
        return self.instant.astimezone(timezone.utc)


def load_timezone(tzid: Optional[str]) -> Optional[ZoneInfo]:
    """
    Resolve an IANA identifier, returning None when it is absent or unknown.
    """
    if not tzid:
        return None
    try:
        return ZoneInfo(tzid)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.warning(f"Timezone '{tzid}' not found or invalid ({e})")
        return None


def combine_local(day: date, clock: time, tz: tzinfo) -> datetime:
    """
    Build an aware datetime from a calendar day and a wall-clock time.

    Only year/month/day are taken from `day` and only
    hour/minute/second from `clock`, so a tzinfo carried by
    `clock` can never shift the calendar day.
    """
    return datetime(
        day.year,
        day.month,
        day.day,
        clock.hour,
        clock.minute,
        clock.second,
        tzinfo=tz,
    )


class BirthMomentResolver:
    """
    Converts raw birth data into the calculation instant.

    Never fails: a missing or unknown timezone degrades to 12:00 UTC.
    """

    def resolve(self, chart_input: ChartInput, chart_type: ChartType) -> BirthMoment:
        tz = load_timezone(chart_input.timezone)

        if chart_type == ChartType.FULL_NATAL and tz is not None:
            instant = combine_local(chart_input.birth_date, chart_input.birth_time, tz)
            return BirthMoment(instant=instant)

        if chart_type == ChartType.NOON_CHART_NO_HOUSES:
            assumptions = [ASSUMPTION_LOCAL_NOON]
            if tz is None:
                return BirthMoment(
                    instant=combine_local(chart_input.birth_date, LOCAL_NOON, timezone.utc),
                    assumptions=assumptions,
                )
            return BirthMoment(
                instant=combine_local(chart_input.birth_date, LOCAL_NOON, tz),
                assumptions=assumptions,
            )

        if tz is not None:
            return BirthMoment(
                instant=combine_local(chart_input.birth_date, LOCAL_NOON, tz),
                assumptions=[ASSUMPTION_DATE_ONLY_LOCAL_NOON],
            )

        return BirthMoment(
            instant=combine_local(chart_input.birth_date, LOCAL_NOON, timezone.utc),
            assumptions=[ASSUMPTION_DATE_ONLY_UTC_NOON],
        )
