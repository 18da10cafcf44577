"""Second-order (cascade) risks derived from overdraft and credit consequences"""

from dataclasses import replace
from typing import List

from consequence_engine.domain.models import (
    CascadeEffect,
    ConsequenceModel,
    EmergencyFundImpact,
    FinancialContext,
    PaymentAnalysis,
    RiskLevel,
)

CREDIT_SCORE_UTILIZATION_PERCENT = 30.0
CASH_FLOW_INCOME_SHARE = 0.1  # new monthly obligations above 10% of income strain cash flow


def calculate_emergency_fund_impact(current_emergency_fund: float, used_amount: float) -> EmergencyFundImpact:
    """
    Classify how much of the emergency fund a shortfall would consume.

    Bands by reduction: >75% severe, >50% moderate, >25% noticeable, else minimal.
    An empty fund has nothing to deplete and reports no impact.
    """
    if current_emergency_fund <= 0:
        return EmergencyFundImpact(impact="none", amount=0.0)

    remaining_fund = max(0.0, current_emergency_fund - used_amount)
    reduction_percentage = (current_emergency_fund - remaining_fund) / current_emergency_fund * 100

    impact = "minimal"
    if reduction_percentage > 75:
        impact = "severe"
    elif reduction_percentage > 50:
        impact = "moderate"
    elif reduction_percentage > 25:
        impact = "noticeable"

    return EmergencyFundImpact(
        impact=impact,
        amount=used_amount,
        reduction_percentage=reduction_percentage,
        remaining_fund=remaining_fund,
    )


def calculate_monthly_payment_increase(model: ConsequenceModel) -> float:
    """Sum of the new minimum payments across charged cards"""
    return sum(cost.minimum_payment for cost in model.interest_costs.values())


def analyze_cascade_effects(
    payment_analysis: PaymentAnalysis,
    model: ConsequenceModel,
    financial_context: FinancialContext,
) -> ConsequenceModel:
    """
    Stage 4: derive secondary risks and the total additional cost.

    Effects:
    - emergency_fund_depletion (high): shortfall would consume over 75% of the fund
    - credit_score_impact (moderate): one per card pushed above 30% utilization
    - cash_flow_stress (high): new minimum payments exceed 10% of monthly income,
      costed at twelve months of the increase
    - reduced_borrowing_capacity (moderate): any credit card was charged
    """
    cascade_effects: List[CascadeEffect] = []

    if payment_analysis.shortfall > 0:
        fund_impact = calculate_emergency_fund_impact(financial_context.emergency_fund, payment_analysis.shortfall)
        if fund_impact.impact == "severe":
            cascade_effects.append(
                CascadeEffect(
                    type="emergency_fund_depletion",
                    severity=RiskLevel.HIGH,
                    description="Emergency fund would be significantly depleted",
                    financial_impact=fund_impact.amount,
                    risk_level=RiskLevel.HIGH,
                )
            )

    for utilization in model.credit_utilization.values():
        if utilization.utilization_rate > CREDIT_SCORE_UTILIZATION_PERCENT:
            cascade_effects.append(
                CascadeEffect(
                    type="credit_score_impact",
                    severity=RiskLevel.MODERATE,
                    description=(
                        f"High credit utilization ({utilization.utilization_rate:.1f}%) "
                        f"on {utilization.account_name} may reduce credit score"
                    ),
                    financial_impact=0.0,
                    risk_level=RiskLevel.MODERATE,
                )
            )

    monthly_payment_increase = calculate_monthly_payment_increase(model)
    if monthly_payment_increase > financial_context.monthly_income * CASH_FLOW_INCOME_SHARE:
        cascade_effects.append(
            CascadeEffect(
                type="cash_flow_stress",
                severity=RiskLevel.HIGH,
                description=f"Monthly payment obligations would increase by ${monthly_payment_increase:,.2f}",
                financial_impact=monthly_payment_increase * 12,
                risk_level=RiskLevel.HIGH,
            )
        )

    if model.credit_utilization:
        cascade_effects.append(
            CascadeEffect(
                type="reduced_borrowing_capacity",
                severity=RiskLevel.MODERATE,
                description="Increased credit utilization may limit future borrowing options",
                financial_impact=0.0,
                risk_level=RiskLevel.MODERATE,
            )
        )

    total_additional_costs = (
        model.total_overdraft_costs
        + model.total_credit_costs
        + sum(effect.financial_impact for effect in cascade_effects)
    )

    return replace(model, cascade_effects=tuple(cascade_effects), total_additional_costs=total_additional_costs)
