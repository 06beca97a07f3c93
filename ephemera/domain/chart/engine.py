import logging
from datetime import datetime
from typing import List, Optional

from ephemera.domain.chart.aspect_calculator import AspectCalculator
from ephemera.domain.chart.birth_moment import BirthMoment, BirthMomentResolver, load_timezone
from ephemera.domain.chart.chart_type import ChartTypeResolver
from ephemera.domain.chart.ephemeris import EphemerisProvider, all_positions, julian_day
from ephemera.domain.chart.errors import ChartError, InvalidChartInputError
from ephemera.domain.chart.evolutionary_core import EvolutionaryCoreBuilder
from ephemera.domain.chart.house_calculator import HouseAnglesCalculator
from ephemera.domain.chart.moon_uncertainty import MoonUncertaintyChecker
from ephemera.domain.chart.schemas import (
    ChartAngles,
    ChartInput,
    ChartMetadata,
    ChartResult,
    House,
    PlanetaryPosition,
)
from ephemera.domain.chart.zodiac import ChartStatus, ChartType, NodeType
from ephemera.domain.transits.schemas import TransitAspect
from ephemera.domain.transits.transit_engine import TransitEngine

logger = logging.getLogger(__name__)

NEEDS_GEOCODING_ERROR = "Birth place provided but lat/lon/timezone not resolved"


class ChartEngine:
    """
    Orchestrates natal chart calculation.

    This class:
    - Accepts a ChartInput
    - Queries the injected ephemeris provider at one instant
    - Returns an immutable ChartResult

    Incomplete birth data is not an error: it selects a lower chart tier
    and is recorded in the metadata assumptions.
    """

    def __init__(
        self,
        provider: EphemerisProvider,
        *,
        include_angles_in_aspects: bool = False,
        transit_top_n: int = 6,
    ):
        self.provider = provider
        self.include_angles_in_aspects = include_angles_in_aspects
        self.transit_top_n = transit_top_n

        self.chart_type_resolver = ChartTypeResolver()
        self.moment_resolver = BirthMomentResolver()
        self.moon_checker = MoonUncertaintyChecker(provider)
        self.house_calculator = HouseAnglesCalculator(provider)
        self.aspect_calculator = AspectCalculator()
        self.core_builder = EvolutionaryCoreBuilder()
        self.transit_engine = TransitEngine(provider)

    def compute_chart(self, chart_input: ChartInput) -> ChartResult:
        """
        Generate a chart.

        This method is:
        - Pure (apart from logging)
        - Deterministic
        - Exception free for expected conditions
        """

        # ─────────────────────────────────────────────
        # Step 1: Place must be geocoded before anything else
        # ─────────────────────────────────────────────

        if chart_input.birth_place and not chart_input.has_resolved_place:
            logger.info(f"Place '{chart_input.birth_place}' is not geocoded yet")
            return ChartResult.failure(ChartStatus.NEEDS_GEOCODING, [NEEDS_GEOCODING_ERROR])

        try:
            self._validate(chart_input)
            return self._compute(chart_input)
        except ChartError as e:
            logger.error(f"Chart calculation failed: {e}")
            return ChartResult.failure(ChartStatus.ERROR, [str(e)])

    def compute_transits(
        self,
        natal_positions: List[PlanetaryPosition],
        at: datetime,
    ) -> List[TransitAspect]:
        """
        Every transit to the natal positions at `at`, most significant first.

        Raises TransitCalculationError when the provider fails.
        """
        return self.transit_engine.calculate(natal_positions, at)

    def compute_top_transits(
        self,
        natal_positions: List[PlanetaryPosition],
        at: datetime,
        limit: Optional[int] = None,
    ) -> List[TransitAspect]:
        return self.transit_engine.top(
            natal_positions,
            at,
            limit=self.transit_top_n if limit is None else limit,
        )

    # ─────────────────────────────────────────────
    # Internal steps
    # ─────────────────────────────────────────────

    def _validate(self, chart_input: ChartInput) -> None:
        errors: List[str] = []

        if chart_input.latitude is not None and not -90.0 <= chart_input.latitude <= 90.0:
            errors.append(f"Latitude {chart_input.latitude} is outside [-90, 90]")
        if chart_input.longitude is not None and not -180.0 <= chart_input.longitude <= 180.0:
            errors.append(f"Longitude {chart_input.longitude} is outside [-180, 180]")
        if chart_input.timezone and load_timezone(chart_input.timezone) is None:
            errors.append(f"Unknown timezone identifier '{chart_input.timezone}'")

        if errors:
            raise InvalidChartInputError("; ".join(errors))

    def _compute(self, chart_input: ChartInput) -> ChartResult:
        chart_type = self.chart_type_resolver.resolve(chart_input)
        moment = self.moment_resolver.resolve(chart_input, chart_type)
        logger.debug(f"Chart tier {chart_type.value} at {moment.utc.isoformat()}")

        planets = all_positions(
            self.provider,
            moment.instant,
            use_true_node=chart_input.node_type == NodeType.TRUE,
        )

        uncertainty = self.moon_checker.check(moment.instant, load_timezone(chart_input.timezone))
        planets = self.moon_checker.apply(planets, uncertainty)

        angles: Optional[ChartAngles] = None
        houses: Optional[List[House]] = None

        if chart_type == ChartType.FULL_NATAL:
            calculated = self.house_calculator.calculate(
                moment.instant,
                chart_input.latitude,
                chart_input.longitude,
            )
            if calculated is not None:
                angles, houses = calculated
                planets = self.house_calculator.assign_houses(planets, angles.ascendant.sign)

        aspects = self.aspect_calculator.calculate(self._aspect_points(planets, angles))
        rising_sign = angles.ascendant.sign if angles else None

        return ChartResult(
            status=ChartStatus.OK,
            errors=[],
            chart_type=chart_type,
            metadata=self._metadata(chart_input, moment),
            angles=angles,
            houses=houses,
            planets=planets,
            aspects=aspects,
            evolutionary_core=self.core_builder.build(planets, rising_sign, chart_type),
        )

    def _aspect_points(
        self,
        planets: List[PlanetaryPosition],
        angles: Optional[ChartAngles],
    ) -> List[PlanetaryPosition]:
        points = list(planets)
        if self.include_angles_in_aspects and angles is not None:
            points.extend([
                angles.ascendant,
                angles.midheaven,
                angles.descendant,
                angles.imum_coeli,
            ])
        return points

    def _metadata(self, chart_input: ChartInput, moment: BirthMoment) -> ChartMetadata:
        if chart_input.birth_time_unknown:
            birth_time_input = "unknown"
        elif chart_input.birth_time is not None:
            birth_time_input = chart_input.birth_time.strftime("%H:%M")
        else:
            birth_time_input = None

        return ChartMetadata(
            birth_date=chart_input.birth_date,
            birth_time_input=birth_time_input,
            birth_place_input=chart_input.birth_place,
            latitude=chart_input.latitude,
            longitude=chart_input.longitude,
            timezone=chart_input.timezone,
            node_type=chart_input.node_type,
            utc_datetime_used=moment.utc,
            julian_day=julian_day(moment.instant),
            assumptions=list(moment.assumptions),
        )
