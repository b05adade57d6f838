"""
Deletion Reconciliation
=======================

Deletes a listing and takes its payment back out of the agent earnings
ledger and the revenue ledger.

Ledger reversals run before the delete. A database error in a reversal is
logged and reported as a warning and the delete still goes ahead; any other
error rolls the whole call back so it can be retried.

A renewed listing carries one ``PaymentPeriod`` per earlier paid year. Each
is reversed from its own stored plan, amount, day and district, after the
current year. Only the current year gives the agent's shop back.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from django.db import transaction
from django.utils import timezone

from apps.agents.models import Agent
from apps.agents.services.ledger import reverse_commission
from apps.revenue.services.ledger import normalize_district, reverse_payment
from ..exceptions import NegativeBalanceClamped
from ..plans import get_plan
from .ledger_steps import run_ledger_step
from .listing_lookup import get_listing_pair, resolve_owning_agent

logger = logging.getLogger(__name__)


@dataclass
class DeletionResult:
    commission_reversed: Decimal = Decimal('0')
    revenue_reversed: Decimal = Decimal('0')
    agent: Optional[Agent] = None
    warnings: List[Exception] = field(default_factory=list)

    @property
    def deductions(self):
        return {
            'commission_deducted': self.commission_reversed,
            'revenue_deducted': self.revenue_reversed,
            'agent_name': self.agent.name if self.agent else None,
            'agent_code': self.agent.agent_code if self.agent else None,
        }


def _reverse_booking(
    result,
    *,
    listing_pk,
    plan_code,
    amount,
    commission,
    district,
    payment_date,
    release_shop
):
    """Reverse one paid year from both ledgers, adding what moved to ``result``."""
    if result.agent is not None:
        reversal = run_ledger_step(
            'agent',
            lambda: reverse_commission(
                agent=result.agent,
                commission=commission,
                release_shop=release_shop
            ),
            listing_id=listing_pk,
            warnings=result.warnings
        )
        if reversal is not None:
            result.commission_reversed += reversal.reversed
            if reversal.clamped:
                warning = NegativeBalanceClamped(
                    result.agent.agent_code, commission, reversal.available
                )
                logger.warning(str(warning))
                result.warnings.append(warning)
    else:
        logger.warning(
            "No agent found for paid listing %s; commission %s not reversed",
            listing_pk, commission
        )

    if payment_date is None:
        return

    row = run_ledger_step(
        'revenue',
        lambda: reverse_payment(
            day=timezone.localdate(payment_date),
            district=district,
            plan_code=plan_code,
            amount=amount,
            commission=commission
        ),
        listing_id=listing_pk,
        warnings=result.warnings
    )
    if row is not None:
        result.revenue_reversed += amount


@transaction.atomic
def delete_listing(*, listing_id) -> DeletionResult:
    """
    Delete both copies of a listing, reversing its ledger effects if it was PAID.

    Earnings and shop count are clamped at zero; a clamp is logged and
    returned as a NegativeBalanceClamped warning. A missing revenue row is
    skipped.

    Returns:
        DeletionResult with the amounts actually reversed

    Raises:
        ListingNotFoundError: If neither store holds the listing
    """
    pair = get_listing_pair(listing_id=listing_id, for_update=True)
    listing = pair.primary
    listing_pk = listing.pk

    result = DeletionResult(agent=resolve_owning_agent(pair))

    if listing.is_paid:
        plan = get_plan(listing.plan_type)
        if listing.agent_commission is not None:
            commission = listing.agent_commission
        else:
            commission = plan.commission_for(listing.plan_amount)
        _reverse_booking(
            result,
            listing_pk=listing_pk,
            plan_code=plan.code,
            amount=listing.plan_amount,
            commission=commission,
            district=normalize_district(listing.district),
            payment_date=listing.last_payment_date,
            release_shop=True
        )

    for period in pair.payment_periods():
        _reverse_booking(
            result,
            listing_pk=listing_pk,
            plan_code=period.plan_type,
            amount=period.amount,
            commission=period.commission,
            district=period.district,
            payment_date=period.paid_at,
            release_shop=False
        )

    for copy in pair.copies:
        copy.delete()

    logger.info(
        "Deleted listing %s: commission reversed %s, revenue reversed %s",
        listing_pk, result.commission_reversed, result.revenue_reversed
    )
    return result
