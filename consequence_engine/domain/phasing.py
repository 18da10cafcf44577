"""Phased payment plans for spreading a large expense over several months"""

from typing import List
from consequence_engine.domain.models import PaymentPhase

DEFAULT_PHASE_COUNT = 3


def split_into_phases(amount: float, num_phases: int = DEFAULT_PHASE_COUNT) -> List[PaymentPhase]:
    """
    Split an expense into equal monthly phases.

    Requirements:
    - Equal phases, one per month starting at month 1
    - Amounts are whole cents
    - Last phase absorbs the rounding remainder (at most num_phases-1 cents drift)

    Args:
        amount: Total dollar amount to spread
        num_phases: Number of monthly phases (default 3)

    Returns:
        List of PaymentPhase objects, empty when there is nothing to split

    Example:
        $1,000.00 over 3 months → [$333.33, $333.33, $333.34]
        100000 cents / 3 = 33333 base, remainder 1
        Last phase: 33333 + 1 = 33334
    """
    if amount <= 0 or num_phases <= 0:
        return []

    amount_cents = round(amount * 100)

    # Calculate base amount and remainder
    base_cents, remainder = divmod(amount_cents, num_phases)

    phases = []
    for i in range(num_phases):
        # Last phase absorbs remainder to keep the total exact
        cents = base_cents + (remainder if i == num_phases - 1 else 0)
        phases.append(PaymentPhase(month=i + 1, amount=cents / 100))

    return phases
