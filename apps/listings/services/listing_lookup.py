"""Find both copies of a listing and the agent it belongs to."""

import logging
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from django.conf import settings
from django.db.models import Q

from apps.agents.models import Agent
from ..exceptions import ListingNotFoundError
from ..models import AgentListing, PublicListing, PaymentPeriod

logger = logging.getLogger(__name__)


@dataclass
class ListingPair:
    """The agent-scoped and public copies of one listing. Either may be missing."""
    agent_copy: Optional[AgentListing] = None
    public_copy: Optional[PublicListing] = None

    @property
    def primary(self):
        """The copy callers read state from: agent copy first, then public."""
        return self.agent_copy or self.public_copy

    @property
    def copies(self) -> List:
        return [copy for copy in (self.agent_copy, self.public_copy) if copy is not None]

    def payment_periods(self):
        """Earlier paid years recorded against either copy."""
        query = Q()
        if self.agent_copy is not None:
            query |= Q(agent_listing=self.agent_copy)
        if self.public_copy is not None:
            query |= Q(public_listing=self.public_copy)
        return PaymentPeriod.objects.filter(query)


def _parse_id(listing_id):
    if isinstance(listing_id, UUID):
        return listing_id
    try:
        return UUID(str(listing_id))
    except ValueError:
        raise ListingNotFoundError(f"Listing with id {listing_id} not found")


def get_listing_pair(*, listing_id, for_update: bool = False) -> ListingPair:
    """
    Resolve a listing id against the agent store, then the public store.

    The counterpart copy is followed through the ``public_listing`` link.
    With ``for_update`` every row is fetched with ``SELECT ... FOR UPDATE``;
    call it inside ``transaction.atomic()``.

    Raises:
        ListingNotFoundError: If neither store holds the id
    """
    pk = _parse_id(listing_id)
    agent_listings = AgentListing.objects.all()
    public_listings = PublicListing.objects.all()
    if for_update:
        agent_listings = agent_listings.select_for_update()
        public_listings = public_listings.select_for_update()

    agent_copy = agent_listings.filter(pk=pk).first()
    if agent_copy is not None:
        public_copy = None
        if agent_copy.public_listing_id:
            public_copy = public_listings.filter(pk=agent_copy.public_listing_id).first()
        return ListingPair(agent_copy=agent_copy, public_copy=public_copy)

    public_copy = public_listings.filter(pk=pk).first()
    if public_copy is None:
        raise ListingNotFoundError(f"Listing with id {listing_id} not found")

    agent_copy = agent_listings.filter(public_listing_id=public_copy.pk).first()
    return ListingPair(agent_copy=agent_copy, public_copy=public_copy)


def resolve_owning_agent(pair: ListingPair) -> Optional[Agent]:
    """
    Agent credited with a listing's commission.

    Order of precedence:
        1. The agent copy's agent.
        2. The public copy's ``created_by_agent``.
        3. The agent profile of the public copy's ``created_by_admin`` user,
           only when ``CREDIT_COMMISSION_TO_CREATOR`` is enabled.

    Returns None when nothing resolves; callers treat that as non-fatal.
    """
    if pair.agent_copy is not None:
        return pair.agent_copy.agent

    public = pair.public_copy
    if public is None:
        return None

    if public.created_by_agent_id:
        return public.created_by_agent

    if not public.created_by_admin_id:
        logger.info("Listing %s has no agent or creator reference", public.pk)
        return None

    if not settings.CREDIT_COMMISSION_TO_CREATOR:
        logger.info(
            "Listing %s has only a creator reference; creator crediting is disabled",
            public.pk
        )
        return None

    agent = Agent.objects.filter(user_id=public.created_by_admin_id).first()
    if agent is None:
        logger.info(
            "Creator of listing %s is not linked to an agent", public.pk
        )
    else:
        logger.warning(
            "Listing %s attributed to agent %s through its creator reference",
            public.pk, agent.agent_code
        )
    return agent
