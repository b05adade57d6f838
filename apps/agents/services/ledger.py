"""Commutative balance updates on the agent earnings ledger."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db.models import F, Value
from django.db.models.functions import Greatest

from ..models import Agent

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


@dataclass
class CommissionReversal:
    """Outcome of taking a commission back from an agent."""
    requested: Decimal
    reversed: Decimal
    available: Decimal

    @property
    def clamped(self):
        return self.reversed < self.requested


def credit_commission(*, agent: Agent, commission: Decimal) -> None:
    """
    Add ``commission`` to the agent's earnings.

    Shop count is left alone; it is incremented when the listing is
    registered, not when it is paid for.
    """
    Agent.objects.filter(pk=agent.pk).update(
        total_earnings=F('total_earnings') + commission
    )
    logger.info("Credited %s to agent %s", commission, agent.agent_code)


def reverse_commission(
    *,
    agent: Agent,
    commission: Decimal,
    release_shop: bool = True
) -> CommissionReversal:
    """
    Take ``commission`` and one shop back from the agent, clamping both at zero.

    With ``release_shop=False`` only earnings move; used for earlier paid
    years of a renewed listing, which never added a shop of their own.

    The balance is read under a row lock only to report clamping; the write
    itself is a relative ``GREATEST(x - delta, 0)`` update.
    """
    available = Agent.objects.select_for_update().values_list(
        'total_earnings', flat=True
    ).get(pk=agent.pk)

    updates = {
        'total_earnings': Greatest(F('total_earnings') - commission, Value(ZERO)),
    }
    if release_shop:
        updates['total_shops'] = Greatest(F('total_shops') - 1, Value(0))
    Agent.objects.filter(pk=agent.pk).update(**updates)

    reversal = CommissionReversal(
        requested=commission,
        reversed=max(ZERO, min(commission, available)),
        available=available,
    )
    logger.info(
        "Reversed %s of %s from agent %s",
        reversal.reversed, commission, agent.agent_code
    )
    return reversal
