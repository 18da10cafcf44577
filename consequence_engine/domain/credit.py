"""Credit utilization and interest amortization for charged credit cards"""

import math
from dataclasses import replace
from typing import Dict

from consequence_engine.domain.models import (
    AccountType,
    ConsequenceModel,
    CreditUtilization,
    InterestCost,
    InterestProjection,
    PaymentAnalysis,
    RiskLevel,
)

DEFAULT_APR = 0.18
MINIMUM_PAYMENT_RATE = 0.02  # of the balance
MINIMUM_PAYMENT_FLOOR = 25.0
PROJECTION_MONTHS = 12

HIGH_UTILIZATION_PERCENT = 30.0
MODERATE_UTILIZATION_PERCENT = 10.0


def classify_utilization(utilization_rate: float) -> RiskLevel:
    """Map a utilization percentage to its impact band: >30 high, >10 moderate, else low"""
    if utilization_rate > HIGH_UTILIZATION_PERCENT:
        return RiskLevel.HIGH
    elif utilization_rate > MODERATE_UTILIZATION_PERCENT:
        return RiskLevel.MODERATE
    else:
        return RiskLevel.LOW


def minimum_payment_for(balance: float) -> float:
    return max(balance * MINIMUM_PAYMENT_RATE, MINIMUM_PAYMENT_FLOOR)


def project_credit_interest(
    balance: float,
    monthly_rate: float,
    minimum_payment: float,
    months: int = PROJECTION_MONTHS,
) -> InterestProjection:
    """
    Amortize a balance month by month under a fixed minimum payment.

    Each month accrues interest on the running balance and applies whatever part of the
    minimum payment is left after interest to principal. If the payment does not cover the
    interest (negative amortization) the projection stops early.

    Returns:
        InterestProjection with total interest over the horizon, its monthly average, and the
        month the balance reached zero (math.inf when it never does inside the horizon)
    """
    current_balance = balance
    total_interest = 0.0
    payoff_months = 0

    for month in range(1, months + 1):
        if current_balance <= 0:
            break

        interest_charge = current_balance * monthly_rate
        principal_payment = max(0.0, minimum_payment - interest_charge)

        total_interest += interest_charge
        current_balance = max(0.0, current_balance - principal_payment)
        payoff_months = month

        if principal_payment <= 0:
            break

    return InterestProjection(
        monthly_interest=total_interest / months,
        yearly_interest=total_interest,
        payoff_months=math.inf if current_balance > 0 else payoff_months,
    )


def calculate_credit_impacts(payment_analysis: PaymentAnalysis, model: ConsequenceModel) -> ConsequenceModel:
    """
    Stage 3: utilization and 12-month interest for every credit card in the sequence.

    Utilization uses the post-charge balance; a card without a positive limit reports 0%.
    """
    credit_utilization: Dict[str, CreditUtilization] = {}
    interest_costs: Dict[str, InterestCost] = {}

    for step in payment_analysis.fallback_sequence:
        if step.account.type != AccountType.CREDIT_CARD or step.amount <= 0:
            continue

        card = step.account
        credit_limit = card.credit_limit or 0.0
        new_balance = card.current_balance + step.amount
        utilization_rate = new_balance / credit_limit * 100 if credit_limit > 0 else 0.0

        annual_rate = card.interest_rate if card.interest_rate is not None else DEFAULT_APR
        minimum_payment = minimum_payment_for(new_balance)
        projection = project_credit_interest(new_balance, annual_rate / 12, minimum_payment)

        credit_utilization[card.id] = CreditUtilization(
            account_name=card.name,
            previous_balance=card.current_balance,
            new_balance=new_balance,
            credit_limit=credit_limit,
            utilization_rate=utilization_rate,
            utilization_impact=classify_utilization(utilization_rate),
        )
        interest_costs[card.id] = InterestCost(
            account_name=card.name,
            charge_amount=step.amount,
            monthly_interest=projection.monthly_interest,
            yearly_interest=projection.yearly_interest,
            minimum_payment=minimum_payment,
            payoff_time=projection.payoff_months,
        )

    return replace(
        model,
        credit_utilization=credit_utilization,
        interest_costs=interest_costs,
        total_credit_costs=sum(cost.yearly_interest for cost in interest_costs.values()),
    )
