from ephemera.domain.chart.schemas import ChartInput
from ephemera.domain.chart.zodiac import ChartType


class ChartTypeResolver:
    """
    Classifies how complete a birth input is.

    | exact time | resolved place | tier                 |
    |------------|----------------|----------------------|
    | yes        | yes            | FULL_NATAL           |
    | no         | yes            | NOON_CHART_NO_HOUSES |
    | yes / no   | no             | SIGN_BASED_NO_HOUSES |
    """

    def resolve(self, chart_input: ChartInput) -> ChartType:
        has_time = chart_input.has_exact_time
        has_place = chart_input.has_resolved_place

        if has_time and has_place:
            return ChartType.FULL_NATAL
        if has_place:
            return ChartType.NOON_CHART_NO_HOUSES
        return ChartType.SIGN_BASED_NO_HOUSES
