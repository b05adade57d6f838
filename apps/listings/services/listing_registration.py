"""Listing sign-up by a field agent."""

import logging
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F

from apps.agents.models import Agent
from ..models import AgentListing, PublicListing
from ..plans import get_plan

logger = logging.getLogger(__name__)


@transaction.atomic
def register_listing(
    *,
    agent: Agent,
    shop_name: str,
    owner_name: str,
    category: str,
    mobile: str = '',
    email: str = '',
    address: str = '',
    area: str = '',
    pincode: str = '',
    district: str = '',
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    photo_url: str = '',
    plan_type: Optional[str] = None,
    publish: bool = True,
    created_by_admin=None
) -> AgentListing:
    """
    Create a PENDING listing for ``agent``.

    The agent copy is always created. With ``publish`` a public copy is
    created as well and linked to it. The agent's shop count goes up by one
    here; payment later only adds commission.

    Args:
        agent: Agent signing the shop up
        plan_type: Plan the shop intends to buy; defaults to DEFAULT_PLAN_CODE
        publish: Also create the public copy
        created_by_admin: User who entered the listing, if not the agent

    Returns:
        Created AgentListing instance

    Raises:
        InvalidPlanError: If plan_type is not in the catalog
    """
    plan = get_plan(plan_type or settings.DEFAULT_PLAN_CODE)

    fields = {
        'shop_name': shop_name,
        'owner_name': owner_name,
        'category': category,
        'mobile': mobile,
        'email': email,
        'address': address,
        'area': area,
        'pincode': pincode,
        'district': district,
        'latitude': latitude,
        'longitude': longitude,
        'photo_url': photo_url,
        'plan_type': plan.code,
        'plan_amount': plan.amount,
    }

    public_copy = None
    if publish:
        public_copy = PublicListing.objects.create(
            created_by_agent=agent,
            created_by_admin=created_by_admin,
            **fields
        )

    listing = AgentListing.objects.create(
        agent=agent,
        public_listing=public_copy,
        **fields
    )

    Agent.objects.filter(pk=agent.pk).update(total_shops=F('total_shops') + 1)
    logger.info(
        "Agent %s registered listing %s (%s)",
        agent.agent_code, listing.pk, plan.code
    )
    return listing
