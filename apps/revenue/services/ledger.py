"""Upserts and reversals on the per-day, per-district revenue ledger."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from django.db.models import F, Value
from django.db.models.functions import Greatest

from ..models import RevenueLedger, revenue_field, count_field

logger = logging.getLogger(__name__)

UNKNOWN_DISTRICT = 'UNKNOWN'


def normalize_district(district):
    """Upper-cased district name, ``UNKNOWN`` when blank."""
    return (district or '').strip().upper() or UNKNOWN_DISTRICT


def _payment_deltas(plan_code, amount, commission, sign):
    revenue = revenue_field(plan_code)
    count = count_field(plan_code)
    amount = sign * amount
    commission = sign * commission

    if sign > 0:
        plan_count = F(count) + 1
    else:
        plan_count = Greatest(F(count) - 1, Value(0))

    return {
        revenue: F(revenue) + amount,
        count: plan_count,
        'total_revenue': F('total_revenue') + amount,
        'total_agent_commission': F('total_agent_commission') + commission,
        'net_revenue': F('net_revenue') + (amount - commission),
    }


def record_payment(
    *,
    day: date,
    district: str,
    plan_code: str,
    amount: Decimal,
    commission: Decimal
) -> RevenueLedger:
    """
    Add one plan payment to the row for ``(day, district)``, creating it if needed.

    Every counter moves in the same UPDATE, so the row stays balanced.
    """
    district = normalize_district(district)
    row, created = RevenueLedger.objects.get_or_create(date=day, district=district)
    if created:
        logger.info("Opened revenue row for %s %s", day, district)

    RevenueLedger.objects.filter(pk=row.pk).update(
        **_payment_deltas(plan_code, amount, commission, 1)
    )
    row.refresh_from_db()
    return row


def reverse_payment(
    *,
    day: date,
    district: str,
    plan_code: str,
    amount: Decimal,
    commission: Decimal
) -> Optional[RevenueLedger]:
    """
    Take one plan payment back out of the row for ``(day, district)``.

    Returns:
        The updated row, or None when there is no row to reverse
    """
    district = normalize_district(district)
    updated = RevenueLedger.objects.filter(date=day, district=district).update(
        **_payment_deltas(plan_code, amount, commission, -1)
    )
    if not updated:
        logger.info("No revenue row for %s %s; nothing to reverse", day, district)
        return None
    return RevenueLedger.objects.get(date=day, district=district)
