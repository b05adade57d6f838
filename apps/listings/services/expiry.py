"""Take listings whose paid year has run out off the public directory."""

import logging

from django.db import transaction
from django.utils import timezone

from ..models import PaymentStatus, PublicListing

logger = logging.getLogger(__name__)


def find_expired_listings(*, now=None):
    """Public listings still shown whose ``payment_expiry_date`` has passed."""
    now = now or timezone.now()
    return PublicListing.objects.filter(
        payment_status=PaymentStatus.PAID,
        payment_expiry_date__lt=now,
        is_visible=True
    )


@transaction.atomic
def expire_listings(*, now=None) -> int:
    """
    Hide expired public listings.

    Payment status and the ledgers are left alone: the commission and revenue
    for the expired year stay earned, and the agent copy stays PAID.
    ``renew_listing`` books the next year and shows the listing again.

    Returns:
        Number of listings hidden
    """
    expired = find_expired_listings(now=now).select_for_update()
    ids = list(expired.values_list('pk', flat=True))
    if not ids:
        return 0

    hidden = PublicListing.objects.filter(pk__in=ids).update(
        is_visible=False,
        updated_at=timezone.now()
    )
    logger.info("Hid %s expired listing(s)", hidden)
    return hidden
