"""
Revenue Reporting
=================

Read-only queries over the revenue ledger for the admin revenue screens.

Example:
    Revenue for one district over the last month::

        from apps.revenue.services import revenue_report

        report = revenue_report(district='patna', period='month')
        report['totals']['net_revenue']
        for row in report['districts']:
            print(row['district'], row['total_revenue'])
"""

import calendar
from datetime import date, timedelta
from decimal import Decimal

from django.db.models import DecimalField, IntegerField, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.listings.plans import PLAN_CATALOG
from ..exceptions import InvalidPeriodError, InvalidDateRangeError
from ..models import RevenueLedger, revenue_field, count_field
from .ledger import normalize_district

VALID_PERIODS = ('all', 'today', 'week', 'month', 'year')

ZERO = Decimal('0.00')


def _months_back(day, months):
    month_index = day.month - 1 - months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return day.replace(year=year, month=month, day=min(day.day, last_day))


def period_start(period, today=None):
    """
    First day covered by a named period, None for ``all``.

    Raises:
        InvalidPeriodError: If period is not one of VALID_PERIODS
    """
    if period not in VALID_PERIODS:
        raise InvalidPeriodError(
            f"Invalid period: {period}. Must be one of: {', '.join(VALID_PERIODS)}"
        )

    today = today or timezone.localdate()
    if period == 'today':
        return today
    if period == 'week':
        return today - timedelta(days=7)
    if period == 'month':
        return _months_back(today, 1)
    if period == 'year':
        return _months_back(today, 12)
    return None


def _parse_date(value, name):
    if value is None or value == '':
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InvalidDateRangeError(f"Invalid {name}: {value}. Use YYYY-MM-DD format")


def _sum_fields():
    fields = ['total_revenue', 'total_agent_commission', 'net_revenue']
    for code in PLAN_CATALOG:
        fields.append(revenue_field(code))
    return fields


def _count_fields():
    return [count_field(code) for code in PLAN_CATALOG]


def _aggregates():
    aggregates = {
        f"sum_{name}": Coalesce(Sum(name), ZERO, output_field=DecimalField(max_digits=14, decimal_places=2))
        for name in _sum_fields()
    }
    aggregates.update({
        f"sum_{name}": Coalesce(Sum(name), 0, output_field=IntegerField())
        for name in _count_fields()
    })
    return aggregates


def _collect(values):
    """Strip the ``sum_`` aliases and add the overall listing count."""
    totals = {
        name: values[f"sum_{name}"]
        for name in _sum_fields() + _count_fields()
    }
    totals['total_listings'] = sum(totals[name] for name in _count_fields())
    if 'district' in values:
        totals['district'] = values['district']
    return totals


def revenue_report(*, district=None, start_date=None, end_date=None, period='all', today=None):
    """
    Revenue totals for a district and date window.

    An explicit ``start_date``/``end_date`` takes precedence over ``period``.

    Args:
        district: District name, case-insensitive. None or ``all`` for every district.
        start_date: First day (date or ISO string), inclusive
        end_date: Last day (date or ISO string), inclusive
        period: One of VALID_PERIODS, used when no dates are given
        today: Reference day for ``period``; today in the local time zone by default

    Returns:
        dict: ``rows`` (RevenueLedger queryset), ``totals`` (summed counters),
        ``districts`` (per-district totals) and the resolved filter values.

    Raises:
        InvalidPeriodError: If period is not recognized
        InvalidDateRangeError: If a date is malformed or the range is reversed
    """
    start = _parse_date(start_date, 'start_date')
    end = _parse_date(end_date, 'end_date')

    if start is None and end is None:
        start = period_start(period or 'all', today=today)
    elif start and end and start > end:
        raise InvalidDateRangeError("start_date must be before or equal to end_date")

    rows = RevenueLedger.objects.all()
    if district and district.lower() != 'all':
        district = normalize_district(district)
        rows = rows.filter(district=district)
    else:
        district = None
    if start:
        rows = rows.filter(date__gte=start)
    if end:
        rows = rows.filter(date__lte=end)

    totals = _collect(rows.aggregate(**_aggregates()))
    districts = [
        _collect(entry)
        for entry in rows.order_by().values('district').annotate(**_aggregates()).order_by('district')
    ]

    return {
        'district': district,
        'period': period,
        'start_date': start,
        'end_date': end,
        'rows': rows.order_by('-date', 'district'),
        'totals': totals,
        'districts': districts,
    }
