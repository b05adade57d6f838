"""Services for the revenue ledger."""

from ..exceptions import (
    RevenueServiceError,
    InvalidPeriodError,
    InvalidDateRangeError,
)
from .ledger import (
    UNKNOWN_DISTRICT,
    normalize_district,
    record_payment,
    reverse_payment,
)
from .ledger_rebuild import (
    RevenueDrift,
    expected_revenue,
    rebuild_revenue_ledger,
)
from .reporting import (
    VALID_PERIODS,
    period_start,
    revenue_report,
)

__all__ = [
    # Exceptions
    'RevenueServiceError',
    'InvalidPeriodError',
    'InvalidDateRangeError',
    # Ledger
    'UNKNOWN_DISTRICT',
    'normalize_district',
    'record_payment',
    'reverse_payment',
    # Rebuild
    'RevenueDrift',
    'expected_revenue',
    'rebuild_revenue_ledger',
    # Reporting
    'VALID_PERIODS',
    'period_start',
    'revenue_report',
]
