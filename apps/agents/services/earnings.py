"""
Recompute agent balances from the listings they own.

``total_shops`` and ``total_earnings`` are running balances kept up to date by
the payment and deletion reconcilers. When a ledger write fails part-way the
balances drift; the functions here rebuild them from the listings, which are
the record of fact.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q

from apps.listings.models import AgentListing, PublicListing, PaymentPeriod, PaymentStatus
from apps.listings.plans import get_plan
from ..exceptions import AgentNotFoundError
from ..models import Agent

logger = logging.getLogger(__name__)


@dataclass
class AgentStatsDrift:
    agent: Agent
    old_shops: int
    new_shops: int
    old_earnings: Decimal
    new_earnings: Decimal
    paid_listings: int = 0

    def as_dict(self):
        return {
            'agent_id': str(self.agent.id),
            'agent_code': self.agent.agent_code,
            'old_shops': self.old_shops,
            'new_shops': self.new_shops,
            'old_earnings': self.old_earnings,
            'new_earnings': self.new_earnings,
            'paid_listings': self.paid_listings,
        }


def _public_only_listings(agent):
    """Published listings attributed to ``agent`` that have no agent copy."""
    listings = PublicListing.objects.filter(
        created_by_agent=agent,
        agent_listing__isnull=True
    )
    if settings.CREDIT_COMMISSION_TO_CREATOR and agent.user_id:
        listings = listings | PublicListing.objects.filter(
            created_by_agent__isnull=True,
            created_by_admin_id=agent.user_id,
            agent_listing__isnull=True
        )
    return listings


def _listing_commission(plan_type, plan_amount, agent_commission):
    if agent_commission is not None:
        return agent_commission
    return get_plan(plan_type).commission_for(plan_amount)


def expected_balances(agent):
    """
    Shop count and earnings an agent should have according to its listings.

    Earnings cover every PAID listing the agent owns plus the earlier paid
    years of the ones that were renewed.

    Returns:
        tuple: ``(total_shops, total_earnings, paid_listings)``
    """
    total_shops = AgentListing.objects.filter(agent=agent).count()

    fields = ('plan_type', 'plan_amount', 'agent_commission')
    paid_rows = list(
        AgentListing.objects.filter(
            agent=agent,
            payment_status=PaymentStatus.PAID
        ).values_list(*fields)
    )
    paid_rows += list(
        _public_only_listings(agent).filter(
            payment_status=PaymentStatus.PAID
        ).values_list(*fields)
    )

    earnings = sum(
        (_listing_commission(*row) for row in paid_rows),
        Decimal('0.00')
    )

    # Earlier paid years of renewed listings
    periods = PaymentPeriod.objects.filter(
        Q(agent_listing__agent=agent)
        | Q(agent_listing__isnull=True, public_listing__in=_public_only_listings(agent))
    )
    earnings += sum(periods.values_list('commission', flat=True), Decimal('0.00'))
    return total_shops, earnings, len(paid_rows)


@transaction.atomic
def recalculate_agent_stats(*, agent: Optional[Agent] = None, apply: bool = True) -> List[AgentStatsDrift]:
    """
    Recalculate ``total_shops`` and ``total_earnings`` for one or all agents.

    Args:
        agent: Restrict to this agent; all agents when None
        apply: Overwrite drifted balances. With False, only report them.

    Returns:
        List of AgentStatsDrift, one per agent whose balances differed
    """
    agents = Agent.objects.select_for_update().order_by('agent_code')
    if agent is not None:
        agents = agents.filter(pk=agent.pk)

    drifts = []
    for current in agents:
        shops, earnings, paid = expected_balances(current)
        if shops == current.total_shops and earnings == current.total_earnings:
            continue

        drift = AgentStatsDrift(
            agent=current,
            old_shops=current.total_shops,
            new_shops=shops,
            old_earnings=current.total_earnings,
            new_earnings=earnings,
            paid_listings=paid,
        )
        drifts.append(drift)
        logger.warning(
            "Agent %s drifted: shops %s -> %s, earnings %s -> %s",
            current.agent_code, drift.old_shops, shops, drift.old_earnings, earnings
        )

        if apply:
            Agent.objects.filter(pk=current.pk).update(
                total_shops=shops,
                total_earnings=earnings
            )

    return drifts


@transaction.atomic
def recalculate_agent_earnings(*, agent_id: UUID) -> AgentStatsDrift:
    """
    Rebuild a single agent's earnings from its PAID listings.

    Shop count is left as is.

    Raises:
        AgentNotFoundError: If agent doesn't exist
    """
    try:
        agent = Agent.objects.select_for_update().get(id=agent_id)
    except (Agent.DoesNotExist, ValidationError):
        raise AgentNotFoundError(f"Agent with id {agent_id} not found")

    _, earnings, paid = expected_balances(agent)
    drift = AgentStatsDrift(
        agent=agent,
        old_shops=agent.total_shops,
        new_shops=agent.total_shops,
        old_earnings=agent.total_earnings,
        new_earnings=earnings,
        paid_listings=paid,
    )

    if earnings != agent.total_earnings:
        logger.warning(
            "Agent %s earnings recalculated: %s -> %s",
            agent.agent_code, agent.total_earnings, earnings
        )
        Agent.objects.filter(pk=agent.pk).update(total_earnings=earnings)
        agent.total_earnings = earnings

    return drift
