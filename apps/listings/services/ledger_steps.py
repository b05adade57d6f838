"""Savepoint wrapper for the ledger writes that follow a listing update."""

import logging

from django.db import DatabaseError, transaction

from ..exceptions import PartialReconciliationFailure

logger = logging.getLogger(__name__)


def run_ledger_step(ledger, step, *, listing_id, warnings):
    """
    Run ``step()`` in a savepoint and return its result.

    A database error rolls back to the savepoint, is logged, and is appended
    to ``warnings`` as a PartialReconciliationFailure; None is returned and
    the enclosing transaction carries on. Other exceptions propagate.
    """
    try:
        with transaction.atomic():
            return step()
    except DatabaseError as e:
        failure = PartialReconciliationFailure(
            ledger,
            f"{ledger} ledger update failed for listing {listing_id}: {e}"
        )
        logger.error(str(failure), exc_info=True)
        warnings.append(failure)
        return None
