"""Services for listing payments and their ledgers."""

from ..exceptions import (
    ListingServiceError,
    ListingNotFoundError,
    InvalidPlanError,
    AgentAssociationError,
    PaymentAlreadyBookedError,
    ListingNotRenewableError,
    PartialReconciliationFailure,
    NegativeBalanceClamped,
)
from .listing_lookup import (
    ListingPair,
    get_listing_pair,
    resolve_owning_agent,
)
from .listing_registration import (
    register_listing,
)
from .payment_reconciliation import (
    MarkPaidResult,
    generate_receipt_no,
    mark_paid,
)
from .deletion_reconciliation import (
    DeletionResult,
    delete_listing,
)
from .renewal import (
    RenewalResult,
    renew_listing,
)
from .expiry import (
    find_expired_listings,
    expire_listings,
)

__all__ = [
    # Exceptions
    'ListingServiceError',
    'ListingNotFoundError',
    'InvalidPlanError',
    'AgentAssociationError',
    'PaymentAlreadyBookedError',
    'ListingNotRenewableError',
    'PartialReconciliationFailure',
    'NegativeBalanceClamped',
    # Lookup
    'ListingPair',
    'get_listing_pair',
    'resolve_owning_agent',
    # Registration
    'register_listing',
    # Payment
    'MarkPaidResult',
    'generate_receipt_no',
    'mark_paid',
    # Deletion
    'DeletionResult',
    'delete_listing',
    # Renewal
    'RenewalResult',
    'renew_listing',
    # Expiry
    'find_expired_listings',
    'expire_listings',
]
