"""
Domain exceptions for the listings app.

Exception Hierarchy:
    ListingServiceError (base)
    ├── ListingNotFoundError
    ├── InvalidPlanError
    ├── AgentAssociationError
    ├── PaymentAlreadyBookedError
    ├── ListingNotRenewableError
    ├── PartialReconciliationFailure
    └── NegativeBalanceClamped

``ListingNotFoundError`` and ``InvalidPlanError`` abort an operation and are
surfaced to the caller. ``PartialReconciliationFailure`` and
``NegativeBalanceClamped`` are never raised out of the reconcilers: they are
logged and attached to the operation result as warnings, because the
listing's own payment status is the fact of record and the ledgers can be
recomputed from it.
"""


class ListingServiceError(Exception):
    """Base exception for listing service errors."""
    pass


class ListingNotFoundError(ListingServiceError):
    """Raised when a listing exists in neither the agent nor the public store."""
    pass


class InvalidPlanError(ListingServiceError):
    """Raised when a plan code is not in the plan catalog."""
    pass


class AgentAssociationError(ListingServiceError):
    """Raised when a listing cannot be linked to the agent who owns it."""
    pass


class PaymentAlreadyBookedError(ListingServiceError):
    """
    Raised when a PAID listing is marked paid again with a different plan,
    amount or district. Those are fixed for the paid year; a renewal books
    the next one.
    """
    pass


class ListingNotRenewableError(ListingServiceError):
    """Raised when a listing is still PENDING or its paid year has not run out."""
    pass


class PartialReconciliationFailure(ListingServiceError):
    """
    A ledger write failed after the listing itself was updated.

    Carries the ledger name so reports can say which view needs rebuilding.
    """

    def __init__(self, ledger, message):
        super().__init__(message)
        self.ledger = ledger


class NegativeBalanceClamped(ListingServiceError):
    """Reversing a commission would have taken an agent's earnings below zero."""

    def __init__(self, agent_code, requested, available):
        super().__init__(
            f"Agent {agent_code} has {available} in earnings, "
            f"cannot reverse {requested}; clamped to 0"
        )
        self.agent_code = agent_code
        self.requested = requested
        self.available = available
