"""
Payment Reconciliation
======================

Marks a listing as paid and carries the payment through to the agent
earnings ledger and the revenue ledger.

Write order is fixed: both listing copies first, then the agent ledger, then
the revenue ledger. The listing's own status is the fact of record, so a
failed ledger write does not undo the payment: it is rolled back to its
savepoint, logged, and returned as a warning. ``reconcile_ledgers`` rebuilds
the ledgers from the listings afterwards.

Commission and revenue are only booked on the PENDING -> PAID transition.
Calling ``mark_paid`` again on a PAID listing updates the payment mode, the
receipt number and the plan extras and nothing else. Plan, amount, payment
date and district stay as booked, since deleting the listing reverses the
ledgers from them. ``renew_listing`` books the next paid year.

Example:
    Marking a listing paid in cash::

        from apps.listings.services import mark_paid

        result = mark_paid(listing_id=listing.id, plan_type='PREMIUM')
        result.commission       # Decimal('600')
        result.receipt          # fields for the payment notification
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from typing import List, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.agents.models import Agent
from apps.agents.services.ledger import credit_commission
from apps.revenue.services.ledger import normalize_district, record_payment
from ..exceptions import (
    AgentAssociationError,
    ListingServiceError,
    PaymentAlreadyBookedError,
)
from ..models import PaymentMode, PaymentStatus, PublicListing
from ..plans import get_plan
from .ledger_steps import run_ledger_step
from .listing_lookup import get_listing_pair, resolve_owning_agent

logger = logging.getLogger(__name__)

# Fields every payment writes on each copy
PAYMENT_FIELDS = [
    'payment_status', 'plan_type', 'plan_amount', 'payment_mode', 'receipt_no',
    'last_payment_date', 'payment_expiry_date', 'district', 'priority_rank',
    'placement_slot', 'is_home_page_banner', 'is_top_slider', 'is_left_bar',
    'is_right_bar', 'is_hero', 'updated_at',
]


@dataclass
class MarkPaidResult:
    listing: object
    commission: Decimal
    was_pending: bool
    agent: Optional[Agent] = None
    warnings: List[Exception] = field(default_factory=list)

    @property
    def receipt(self):
        """Fields the payment notification is built from."""
        listing = self.listing
        return {
            'shop_name': listing.shop_name,
            'owner_name': listing.owner_name,
            'amount': listing.plan_amount,
            'receipt_no': listing.receipt_no,
            'payment_date': listing.last_payment_date,
            'payment_mode': listing.payment_mode,
            'mobile': listing.mobile,
        }


def generate_receipt_no(moment):
    return f"REC{int(moment.timestamp() * 1000)}"


def resolve_payment_mode(requested, previous):
    if requested:
        try:
            return PaymentMode(requested.upper())
        except ValueError:
            raise ListingServiceError(f"Invalid payment mode: {requested}")
    if previous and previous != PaymentMode.NONE:
        return previous
    return PaymentMode.CASH


def _apply_plan_extras(copy, plan, whatsapp_number, additional_photos, offers, shop_logo):
    """
    Write optional fields the plan entitles. Nothing is ever cleared here,
    so a downgrade keeps data stored under an earlier plan.
    """
    changed = []
    if plan.has_whatsapp:
        number = whatsapp_number or copy.whatsapp_number or copy.mobile
        if number != copy.whatsapp_number:
            copy.whatsapp_number = number
            changed.append('whatsapp_number')
    if plan.max_photos > 1 and additional_photos is not None:
        copy.additional_photos = list(additional_photos)[:plan.max_photos - 1]
        changed.append('additional_photos')
    if plan.has_offers and offers is not None:
        copy.offers = list(offers)
        changed.append('offers')
    if plan.has_logo and shop_logo:
        copy.shop_logo = shop_logo
        changed.append('shop_logo')
    return changed


def _check_booking_unchanged(listing, plan_type, amount, district):
    """A PAID listing is only re-marked under the plan, amount and district it was booked with."""
    conflicts = []
    if plan_type and get_plan(plan_type).code != listing.plan_type:
        conflicts.append(f"plan {plan_type.upper()}")
    if amount is not None and Decimal(amount) != listing.plan_amount:
        conflicts.append(f"amount {amount}")
    if district and normalize_district(district) != normalize_district(listing.district):
        conflicts.append(f"district {district}")
    if conflicts:
        raise PaymentAlreadyBookedError(
            f"Listing {listing.pk} is already PAID under {listing.plan_type} "
            f"at {listing.plan_amount}; renew it to book {', '.join(conflicts)}"
        )


def apply_booking(
    pair,
    *,
    plan,
    amount,
    commission,
    mode,
    receipt,
    payment_date,
    district,
    extras
):
    """Write a new paid year to every copy of the listing."""
    expiry_date = payment_date + timedelta(days=settings.PAYMENT_VALIDITY_DAYS)

    for copy in pair.copies:
        copy.payment_status = PaymentStatus.PAID
        copy.plan_type = plan.code
        copy.plan_amount = amount
        copy.payment_mode = mode
        copy.receipt_no = receipt
        copy.last_payment_date = payment_date
        copy.payment_expiry_date = expiry_date
        copy.district = district
        copy.agent_commission = commission
        copy.priority_rank = plan.priority_rank
        copy.placement_slot = plan.placement_slot
        for flag, value in plan.placement_flags().items():
            setattr(copy, flag, value)

        update_fields = PAYMENT_FIELDS + ['agent_commission'] + _apply_plan_extras(
            copy, plan, **extras
        )
        if isinstance(copy, PublicListing):
            copy.is_visible = True
            update_fields.append('is_visible')
        copy.save(update_fields=update_fields)


def book_ledgers(pair, result, *, plan, amount, commission, district, payment_date):
    """
    Credit the owning agent and add the payment to the revenue row.

    Each write runs in its own savepoint; failures land in ``result.warnings``.
    """
    primary = pair.primary
    agent = resolve_owning_agent(pair)
    result.agent = agent
    if commission > 0:
        if agent is None:
            warning = AgentAssociationError(
                f"No agent found for listing {primary.pk}; commission {commission} not credited"
            )
            logger.warning(str(warning))
            result.warnings.append(warning)
        else:
            run_ledger_step(
                'agent',
                lambda: credit_commission(agent=agent, commission=commission),
                listing_id=primary.pk,
                warnings=result.warnings
            )

    run_ledger_step(
        'revenue',
        lambda: record_payment(
            day=timezone.localdate(payment_date),
            district=normalize_district(district),
            plan_code=plan.code,
            amount=amount,
            commission=commission
        ),
        listing_id=primary.pk,
        warnings=result.warnings
    )


def _update_paid_listing(pair, *, mode, receipt, extras):
    primary = pair.primary
    plan = get_plan(primary.plan_type)
    for copy in pair.copies:
        copy.payment_mode = mode
        copy.receipt_no = receipt
        update_fields = ['payment_mode', 'receipt_no', 'updated_at'] + _apply_plan_extras(
            copy, plan, **extras
        )
        copy.save(update_fields=update_fields)


@transaction.atomic
def mark_paid(
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
) -> MarkPaidResult:
    """
    Mark a listing as PAID under ``plan_type``.

    Args:
        listing_id: Id of either copy of the listing
        plan_type: Plan code, defaults to DEFAULT_PLAN_CODE for a PENDING
            listing and to the booked plan for a PAID one
        amount: Amount collected, defaults to the plan amount
        payment_mode: CASH or UPI; defaults to the previous mode, then CASH
        receipt_no: Receipt number; generated when the listing becomes PAID
        district: Overrides the stored district
        whatsapp_number, additional_photos, offers, shop_logo: Plan-gated
            extras, only written when the plan includes them

    Returns:
        MarkPaidResult with the updated primary copy and the commission booked

    Raises:
        ListingNotFoundError: If neither store holds the listing
        InvalidPlanError: If plan_type is not in the catalog
        PaymentAlreadyBookedError: If the listing is PAID and plan_type,
            amount or district differ from what was booked
    """
    pair = get_listing_pair(listing_id=listing_id, for_update=True)
    primary = pair.primary
    was_pending = primary.payment_status == PaymentStatus.PENDING

    mode = resolve_payment_mode(payment_mode, primary.payment_mode)
    extras = {
        'whatsapp_number': whatsapp_number,
        'additional_photos': additional_photos,
        'offers': offers,
        'shop_logo': shop_logo,
    }

    if not was_pending:
        _check_booking_unchanged(primary, plan_type, amount, district)
        receipt = receipt_no or primary.receipt_no or generate_receipt_no(timezone.now())
        _update_paid_listing(pair, mode=mode, receipt=receipt, extras=extras)
        logger.info(
            "Listing %s was already PAID; updated payment details only", primary.pk
        )
        return MarkPaidResult(listing=primary, commission=Decimal('0'), was_pending=False)

    plan = get_plan(plan_type or settings.DEFAULT_PLAN_CODE)
    final_amount = Decimal(amount) if amount is not None else plan.amount
    commission = plan.commission_for(final_amount)
    payment_date = timezone.now()
    final_district = district or primary.district

    # 1. Listing copies
    apply_booking(
        pair,
        plan=plan,
        amount=final_amount,
        commission=commission,
        mode=mode,
        receipt=receipt_no or generate_receipt_no(payment_date),
        payment_date=payment_date,
        district=final_district,
        extras=extras
    )

    # 2. Agent ledger, 3. Revenue ledger
    result = MarkPaidResult(listing=primary, commission=commission, was_pending=True)
    book_ledgers(
        pair,
        result,
        plan=plan,
        amount=final_amount,
        commission=commission,
        district=final_district,
        payment_date=payment_date
    )

    logger.info(
        "Listing %s marked PAID: plan %s, amount %s, commission %s",
        primary.pk, plan.code, final_amount, commission
    )
    return result
