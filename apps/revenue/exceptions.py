"""
Domain exceptions for the revenue app.

Exception Hierarchy:
    RevenueServiceError (base)
    ├── InvalidPeriodError
    └── InvalidDateRangeError

Usage:
    from apps.revenue.exceptions import InvalidPeriodError

    if period not in VALID_PERIODS:
        raise InvalidPeriodError(f"Invalid period: {period}")
"""


class RevenueServiceError(Exception):
    """Base exception for all revenue service errors."""
    pass


class InvalidPeriodError(RevenueServiceError):
    """Raised when a report period is not one of the supported names."""
    pass


class InvalidDateRangeError(RevenueServiceError):
    """Raised when a date cannot be parsed or the range is reversed."""
    pass
