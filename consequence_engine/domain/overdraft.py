"""Overdraft and NSF fee modeling for overdrawn checking accounts"""

import math
from typing import List

from consequence_engine.domain.models import (
    Account,
    AccountType,
    ConsequenceModel,
    OverdraftConsequence,
    OverdraftFeeSchedule,
    PaymentAnalysis,
)

DEFAULT_FEE_SCHEDULE = OverdraftFeeSchedule()
DEFAULT_NSF_FEE = 30.0
DEFAULT_DAILY_OVERDRAFT_FEE = 5.0
DEFAULT_MONTHLY_DEPOSITS = 2000.0  # assumed when the account has no deposit history

SURCHARGE_BLOCK = 500.0  # each full block of overdraft adds a surcharge
SURCHARGE_PER_BLOCK = 10.0
MAX_OVERDRAFT_DAYS = 30


def calculate_overdraft_fee(account: Account, overdraft_amount: float) -> float:
    """
    Overdraft fee for a single overdraft event.

    Base fee is the schedule's per-occurrence charge. Overdrafts above $500 add $10 for
    every full $500 overdrawn. The total is capped at max_per_day occurrences.

    Example:
        $1,200 overdraft, default schedule → 35 + 2 * 10 = $55
    """
    if overdraft_amount <= 0:
        return 0.0

    schedule = account.overdraft_fee_schedule or DEFAULT_FEE_SCHEDULE
    fee = schedule.per_occurrence

    if overdraft_amount > SURCHARGE_BLOCK:
        fee += math.floor(overdraft_amount / SURCHARGE_BLOCK) * SURCHARGE_PER_BLOCK

    return min(fee, schedule.max_per_day * schedule.per_occurrence)


def calculate_nsf_charges(account: Account, overdraft_amount: float) -> float:
    """Flat non-sufficient-funds penalty"""
    if overdraft_amount <= 0:
        return 0.0
    return account.nsf_fee if account.nsf_fee is not None else DEFAULT_NSF_FEE


def calculate_daily_overdraft_fee(account: Account) -> float:
    return account.daily_overdraft_fee if account.daily_overdraft_fee is not None else DEFAULT_DAILY_OVERDRAFT_FEE


def estimate_overdraft_duration(account: Account, overdraft_amount: float) -> int:
    """Days of average deposits needed to clear the overdraft, capped at 30"""
    monthly_deposits = account.monthly_deposits or DEFAULT_MONTHLY_DEPOSITS
    days_to_recover = math.ceil(overdraft_amount / (monthly_deposits / 30))
    return min(days_to_recover, MAX_OVERDRAFT_DAYS)


def model_overdraft_consequences(payment_analysis: PaymentAnalysis) -> ConsequenceModel:
    """
    Stage 2: fee consequences of every overdrawn checking step.

    Only checking accounts with a positive overdraft amount produce an entry; other
    account types carrying an uncovered remainder are not overdraft-capable.
    """
    overdraft_fees: List[OverdraftConsequence] = []

    for step in payment_analysis.fallback_sequence:
        if step.account.type != AccountType.CHECKING or step.overdraft_amount <= 0:
            continue

        overdraft_fee = calculate_overdraft_fee(step.account, step.overdraft_amount)
        nsf_charges = calculate_nsf_charges(step.account, step.overdraft_amount)

        overdraft_fees.append(
            OverdraftConsequence(
                account_id=step.account.id,
                account_name=step.account.name,
                overdraft_amount=step.overdraft_amount,
                overdraft_fee=overdraft_fee,
                nsf_charges=nsf_charges,
                total_cost=overdraft_fee + nsf_charges,
                daily_fees=calculate_daily_overdraft_fee(step.account),
                projected_duration=estimate_overdraft_duration(step.account, step.overdraft_amount),
            )
        )

    return ConsequenceModel(
        overdraft_fees=tuple(overdraft_fees),
        total_overdraft_costs=sum(entry.total_cost for entry in overdraft_fees),
    )
