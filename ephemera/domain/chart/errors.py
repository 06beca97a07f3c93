class ChartError(Exception):
    """
    Base exception for all chart-related domain errors.
    """
    pass


class InvalidChartInputError(ChartError):
    """
    Raised when birth inputs are malformed (coordinates out of range,
    unknown timezone identifier).
    """
    pass


class EphemerisError(ChartError):
    """
    Raised when the ephemeris provider cannot answer a query
    (missing data for the requested range, remote source unavailable).
    """
    pass


class InvalidChartStateError(ChartError):
    """
    Raised when a chart that is not `ok` is handed to an operation
    that requires a complete chart (e.g. persistence).
    """
    pass


class TransitCalculationError(ChartError):
    """
    Raised when a transit query cannot be completed.
    """
    pass
