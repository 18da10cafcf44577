"""Payment option ranking, alternative strategies, mitigations and cost optimizations"""

from typing import List, Optional, Sequence, Tuple

from consequence_engine.domain.credit import DEFAULT_APR, HIGH_UTILIZATION_PERCENT
from consequence_engine.domain.models import (
    Account,
    AccountType,
    AlternativeApproach,
    ConsequenceModel,
    CostOptimization,
    IntelligentSolutions,
    OptimalPaymentMethod,
    PaymentAnalysis,
    PaymentStep,
    RiskLevel,
    RiskMitigation,
)
from consequence_engine.domain.overdraft import calculate_overdraft_fee
from consequence_engine.domain.phasing import split_into_phases
from consequence_engine.domain.scenarios import Scenario

PHASED_THRESHOLD = 1000.0  # required amounts above this can be phased
BALANCE_TRANSFER_THRESHOLD = 500.0  # yearly credit interest worth moving to a 0% APR card


def determine_payment_method_risk(step: PaymentStep, cost: float) -> RiskLevel:
    """
    Risk tier of paying a step.

    - high: the step overdraws its account, or costs more than 20% of what it draws
    - moderate: a credit card costing more than $100 in interest
    - low: everything else
    """
    if step.overdraft_amount > 0:
        return RiskLevel.HIGH
    if cost > step.amount * 0.2:
        return RiskLevel.HIGH
    if step.account.type == AccountType.CREDIT_CARD and cost > 100:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def step_cost(step: PaymentStep, model: ConsequenceModel) -> float:
    """Marginal cost of a step: overdraft fee on checking, yearly interest on a card"""
    cost = 0.0
    if step.account.type == AccountType.CHECKING and step.overdraft_amount > 0:
        cost += calculate_overdraft_fee(step.account, step.overdraft_amount)
    if step.account.type == AccountType.CREDIT_CARD:
        interest = model.interest_costs.get(step.account.id)
        cost += interest.yearly_interest if interest is not None else 0.0
    return cost


def find_optimal_payment_method(
    payment_analysis: PaymentAnalysis,
    model: ConsequenceModel,
) -> Optional[OptimalPaymentMethod]:
    """Rank sequence steps by risk tier, then cost; earlier steps win ties"""
    candidates = []
    for step in payment_analysis.fallback_sequence:
        cost = step_cost(step, model)
        candidates.append(
            OptimalPaymentMethod(
                step_index=step.step_index,
                account=step.account,
                cost=cost,
                risk_level=determine_payment_method_risk(step, cost),
            )
        )

    if not candidates:
        return None

    return min(candidates, key=lambda method: (method.risk_level.rank, method.cost))


def generate_alternative_approaches(
    scenario: Scenario,
    payment_analysis: PaymentAnalysis,
    model: ConsequenceModel,
) -> Tuple[AlternativeApproach, ...]:
    alternatives: List[AlternativeApproach] = []

    if payment_analysis.required_amount > PHASED_THRESHOLD:
        alternatives.append(
            AlternativeApproach(
                type="phased_implementation",
                title=f"Implement {scenario.name} in phases",
                description="Split large expense into smaller monthly payments",
                cost_reduction=model.total_additional_costs * 0.6,
                risk_reduction=RiskLevel.MODERATE,
                phases=tuple(split_into_phases(payment_analysis.required_amount)),
            )
        )

    alternatives.append(
        AlternativeApproach(
            type="delayed_execution",
            title=f"Delay {scenario.name} by 3-6 months",
            description="Save additional funds to reduce borrowing needs",
            cost_reduction=model.total_additional_costs * 0.8,
            risk_reduction=RiskLevel.HIGH,
        )
    )

    if scenario.parameters.scalable_amount():
        alternatives.append(
            AlternativeApproach(
                type="scaled_down",
                title=f"Scaled-down version of {scenario.name}",
                description="Reduce scope to match available funds",
                cost_reduction=model.total_additional_costs * 0.5,
                risk_reduction=RiskLevel.MODERATE,
            )
        )

    return tuple(alternatives)


def generate_risk_mitigation_strategies(model: ConsequenceModel) -> Tuple[RiskMitigation, ...]:
    strategies: List[RiskMitigation] = []

    if any(effect.type == "emergency_fund_depletion" for effect in model.cascade_effects):
        strategies.append(
            RiskMitigation(
                type="emergency_fund_protection",
                priority=RiskLevel.HIGH,
                description="Maintain minimum emergency fund of $1,000",
                implementation="Reduce scenario scope or delay execution",
            )
        )

    if any(u.utilization_rate > HIGH_UTILIZATION_PERCENT for u in model.credit_utilization.values()):
        strategies.append(
            RiskMitigation(
                type="credit_utilization_management",
                priority=RiskLevel.MODERATE,
                description="Keep credit utilization below 30%",
                implementation="Spread charges across multiple cards or increase credit limits",
            )
        )

    if model.overdraft_fees:
        strategies.append(
            RiskMitigation(
                type="overdraft_prevention",
                priority=RiskLevel.HIGH,
                description="Avoid overdraft fees through better timing",
                implementation="Time expense after payday or arrange temporary credit increase",
            )
        )

    return tuple(strategies)


def generate_cost_optimizations(
    model: ConsequenceModel,
    accounts: Sequence[Account],
) -> Tuple[CostOptimization, ...]:
    optimizations: List[CostOptimization] = []

    credit_cards = [
        account for account in accounts
        if account.type == AccountType.CREDIT_CARD and account.is_active
    ]
    if len(credit_cards) > 1:
        lowest_rate_card = min(
            credit_cards,
            key=lambda card: card.interest_rate if card.interest_rate is not None else DEFAULT_APR,
        )
        optimizations.append(
            CostOptimization(
                type="interest_rate_optimization",
                description=f"Use {lowest_rate_card.name} for lowest interest rate",
                potential_saving=model.total_credit_costs * 0.3,
            )
        )

    if model.total_credit_costs > BALANCE_TRANSFER_THRESHOLD:
        optimizations.append(
            CostOptimization(
                type="balance_transfer",
                description="Consider 0% APR balance transfer card",
                potential_saving=model.total_credit_costs * 0.8,
            )
        )

    optimizations.append(
        CostOptimization(
            type="payment_timing",
            description="Time large expenses after payroll deposits",
            potential_saving=model.total_overdraft_costs,
        )
    )

    return tuple(optimizations)


def generate_solutions(
    scenario: Scenario,
    accounts: Sequence[Account],
    payment_analysis: PaymentAnalysis,
    model: ConsequenceModel,
) -> IntelligentSolutions:
    """Stage 5: optimal payment method plus alternatives, mitigations and optimizations"""
    return IntelligentSolutions(
        optimal_payment_method=find_optimal_payment_method(payment_analysis, model),
        alternative_approaches=generate_alternative_approaches(scenario, payment_analysis, model),
        risk_mitigation=generate_risk_mitigation_strategies(model),
        cost_optimizations=generate_cost_optimizations(model, accounts),
    )
