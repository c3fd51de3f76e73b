"""
Custom exception hierarchy for mch-summary.

All project-specific exceptions inherit from McSummaryError.
"""


class McSummaryError(Exception):
    """Base exception for mch-summary."""

    pass


class ConfigError(McSummaryError):
    """Invalid or missing configuration."""

    pass


class InvalidResultsError(McSummaryError):
    """Results document is malformed or missing required fields."""

    pass


class UnknownTimeUnitError(InvalidResultsError):
    """Time unit outside the units reported by the benchmark harness."""

    def __init__(self, unit: object):
        self.unit = unit
        super().__init__(f"Unknown time unit: {unit!r}")


class ReportingError(McSummaryError):
    """Error during summary rendering or while appending to the sink."""

    pass
