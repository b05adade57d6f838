"""Services for agent balances."""

from ..exceptions import (
    AgentServiceError,
    AgentNotFoundError,
)
from .ledger import (
    CommissionReversal,
    credit_commission,
    reverse_commission,
)
from .earnings import (
    AgentStatsDrift,
    expected_balances,
    recalculate_agent_stats,
    recalculate_agent_earnings,
)

__all__ = [
    # Exceptions
    'AgentServiceError',
    'AgentNotFoundError',
    # Ledger
    'CommissionReversal',
    'credit_commission',
    'reverse_commission',
    # Earnings
    'AgentStatsDrift',
    'expected_balances',
    'recalculate_agent_stats',
    'recalculate_agent_earnings',
]
