"""
Listing Renewal
===============

Books another paid year for a listing whose previous year has run out.

The current booking on the listing copies is moved to a ``PaymentPeriod``
first, then the new year is written to both copies and credited to the
agent and revenue ledgers the same way a first payment is. Deleting the
listing later reverses the current year and every stored period.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.revenue.services.ledger import normalize_district
from ..exceptions import ListingNotRenewableError
from ..models import PaymentPeriod
from ..plans import get_plan
from .listing_lookup import get_listing_pair
from .payment_reconciliation import (
    MarkPaidResult,
    apply_booking,
    book_ledgers,
    generate_receipt_no,
    resolve_payment_mode,
)

logger = logging.getLogger(__name__)


@dataclass
class RenewalResult(MarkPaidResult):
    previous_period: Optional[PaymentPeriod] = None


def _archive_current_booking(pair):
    listing = pair.primary
    commission = listing.agent_commission
    if commission is None:
        commission = get_plan(listing.plan_type).commission_for(listing.plan_amount)

    return PaymentPeriod.objects.create(
        agent_listing=pair.agent_copy,
        public_listing=pair.public_copy,
        plan_type=listing.plan_type,
        amount=listing.plan_amount,
        commission=commission,
        district=normalize_district(listing.district),
        payment_mode=listing.payment_mode,
        receipt_no=listing.receipt_no,
        paid_at=listing.last_payment_date,
        expired_at=listing.payment_expiry_date,
    )


@transaction.atomic
def renew_listing(
    *,
    listing_id,
    plan_type: Optional[str] = None,
    amount: Optional[Decimal] = None,
    payment_mode: Optional[str] = None,
    receipt_no: Optional[str] = None,
    district: Optional[str] = None,
    whatsapp_number: Optional[str] = None,
    additional_photos: Optional[list] = None,
    offers: Optional[list] = None,
    shop_logo: Optional[str] = None
) -> RenewalResult:
    """
    Renew an expired PAID listing for another year.

    Args:
        listing_id: Id of either copy of the listing
        plan_type: Plan for the new year, defaults to the current plan
        amount: Amount collected, defaults to the plan amount
        payment_mode: CASH or UPI; defaults to the previous mode
        receipt_no: Receipt number; generated when omitted
        district: Overrides the stored district from the new year on

    Returns:
        RenewalResult with the commission booked and the archived period

    Raises:
        ListingNotFoundError: If neither store holds the listing
        ListingNotRenewableError: If the listing is PENDING or still within
            its paid year
        InvalidPlanError: If plan_type is not in the catalog
    """
    pair = get_listing_pair(listing_id=listing_id, for_update=True)
    primary = pair.primary
    now = timezone.now()

    if not primary.is_paid:
        raise ListingNotRenewableError(
            f"Listing {primary.pk} has not been paid for; mark it paid instead"
        )
    if primary.payment_expiry_date and primary.payment_expiry_date > now:
        raise ListingNotRenewableError(
            f"Listing {primary.pk} is paid until {primary.payment_expiry_date:%Y-%m-%d}"
        )

    plan = get_plan(plan_type or primary.plan_type)
    final_amount = Decimal(amount) if amount is not None else plan.amount
    commission = plan.commission_for(final_amount)
    mode = resolve_payment_mode(payment_mode, primary.payment_mode)
    final_district = district or primary.district

    previous = _archive_current_booking(pair)

    apply_booking(
        pair,
        plan=plan,
        amount=final_amount,
        commission=commission,
        mode=mode,
        receipt=receipt_no or generate_receipt_no(now),
        payment_date=now,
        district=final_district,
        extras={
            'whatsapp_number': whatsapp_number,
            'additional_photos': additional_photos,
            'offers': offers,
            'shop_logo': shop_logo,
        }
    )

    result = RenewalResult(
        listing=primary,
        commission=commission,
        was_pending=False,
        previous_period=previous,
    )
    book_ledgers(
        pair,
        result,
        plan=plan,
        amount=final_amount,
        commission=commission,
        district=final_district,
        payment_date=now
    )

    logger.info(
        "Listing %s renewed: plan %s, amount %s, commission %s",
        primary.pk, plan.code, final_amount, commission
    )
    return result
