"""
Rebuild revenue rows from PAID listings.

Payment and deletion reconcilers keep the revenue ledger current with
relative updates. If one of those updates fails, the row drifts from the
listings. ``rebuild_revenue_ledger`` recomputes every row in scope from
the listings and, when asked to, overwrites the drifted ones.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from itertools import chain
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from django.db import transaction
from django.utils import timezone

from apps.listings.models import AgentListing, PublicListing, PaymentPeriod, PaymentStatus
from apps.listings.plans import PLAN_CATALOG, get_plan
from ..exceptions import InvalidDateRangeError
from ..models import RevenueLedger, revenue_field, count_field
from .ledger import normalize_district

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


@dataclass
class RevenueDrift:
    date: date
    district: str
    # field name -> (stored, expected)
    fields: Dict[str, Tuple] = field(default_factory=dict)
    missing: bool = False

    def as_dict(self):
        return {
            'date': self.date.isoformat(),
            'district': self.district,
            'missing': self.missing,
            'fields': {
                name: {'stored': stored, 'expected': expected}
                for name, (stored, expected) in self.fields.items()
            },
        }


def _empty_totals():
    totals = {
        'total_revenue': ZERO,
        'total_agent_commission': ZERO,
        'net_revenue': ZERO,
    }
    for code in PLAN_CATALOG:
        totals[revenue_field(code)] = ZERO
        totals[count_field(code)] = 0
    return totals


def _paid_listings(start_date, end_date):
    """PAID listings, agent copy preferred, then public copies with no agent copy."""
    fields = ('plan_type', 'plan_amount', 'agent_commission', 'district', 'last_payment_date')

    agent_copies = AgentListing.objects.filter(
        payment_status=PaymentStatus.PAID,
        last_payment_date__isnull=False
    )
    public_only = PublicListing.objects.filter(
        payment_status=PaymentStatus.PAID,
        last_payment_date__isnull=False,
        agent_listing__isnull=True
    )

    for queryset in (agent_copies, public_only):
        if start_date:
            queryset = queryset.filter(last_payment_date__date__gte=start_date)
        if end_date:
            queryset = queryset.filter(last_payment_date__date__lte=end_date)
        yield from queryset.values_list(*fields)


def _renewed_periods(start_date, end_date):
    """Earlier paid years of renewed listings, in the same shape as ``_paid_listings``."""
    periods = PaymentPeriod.objects.filter(paid_at__isnull=False)
    if start_date:
        periods = periods.filter(paid_at__date__gte=start_date)
    if end_date:
        periods = periods.filter(paid_at__date__lte=end_date)
    return periods.values_list('plan_type', 'amount', 'commission', 'district', 'paid_at')


def expected_revenue(*, start_date=None, end_date=None, district=None):
    """
    Revenue totals per ``(date, district)`` as implied by PAID listings and
    the earlier paid years of renewed ones.

    Returns:
        dict: ``{(date, DISTRICT): {field: value}}``
    """
    district = normalize_district(district) if district else None
    expected = defaultdict(_empty_totals)

    bookings = chain(_paid_listings(start_date, end_date), _renewed_periods(start_date, end_date))
    for plan_type, amount, commission, listing_district, paid_at in bookings:
        key_district = normalize_district(listing_district)
        if district and key_district != district:
            continue

        plan = get_plan(plan_type)
        if commission is None:
            commission = plan.commission_for(amount)

        totals = expected[(timezone.localdate(paid_at), key_district)]
        totals[revenue_field(plan.code)] += amount
        totals[count_field(plan.code)] += 1
        totals['total_revenue'] += amount
        totals['total_agent_commission'] += commission
        totals['net_revenue'] += amount - commission

    return dict(expected)


@transaction.atomic
def rebuild_revenue_ledger(
    *,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    district: Optional[str] = None,
    apply: bool = True
) -> List[RevenueDrift]:
    """
    Compare revenue rows with PAID listings and optionally repair them.

    Args:
        start_date: First day in scope (inclusive)
        end_date: Last day in scope (inclusive)
        district: Restrict to one district (case-insensitive)
        apply: Overwrite drifted rows and create missing ones

    Returns:
        List of RevenueDrift, one per row that differed or was missing

    Raises:
        InvalidDateRangeError: If start_date is after end_date
    """
    if start_date and end_date and start_date > end_date:
        raise InvalidDateRangeError("start_date must be before or equal to end_date")

    expected = expected_revenue(start_date=start_date, end_date=end_date, district=district)

    rows = RevenueLedger.objects.select_for_update()
    if start_date:
        rows = rows.filter(date__gte=start_date)
    if end_date:
        rows = rows.filter(date__lte=end_date)
    if district:
        rows = rows.filter(district=normalize_district(district))
    stored = {(row.date, row.district): row for row in rows}

    drifts = []
    for key in sorted(set(stored) | set(expected)):
        row = stored.get(key)
        totals = expected.get(key) or _empty_totals()

        if row is None:
            drift = RevenueDrift(date=key[0], district=key[1], missing=True)
            drift.fields = {name: (None, value) for name, value in totals.items()}
        else:
            drift = RevenueDrift(date=key[0], district=key[1])
            drift.fields = {
                name: (getattr(row, name), value)
                for name, value in totals.items()
                if getattr(row, name) != value
            }
            if not drift.fields:
                continue

        drifts.append(drift)
        logger.warning(
            "Revenue row %s %s drifted (%s)",
            drift.date, drift.district,
            'missing' if drift.missing else ', '.join(sorted(drift.fields))
        )

        if apply:
            if row is None:
                RevenueLedger.objects.create(date=key[0], district=key[1], **totals)
            else:
                RevenueLedger.objects.filter(pk=row.pk).update(**totals)

    return drifts
