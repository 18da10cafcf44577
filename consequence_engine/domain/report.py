"""Consequence report synthesis - feasibility, risk banding and recommendations"""

from typing import List, Tuple

from consequence_engine.domain.credit import HIGH_UTILIZATION_PERCENT
from consequence_engine.domain.models import (
    ConsequenceModel,
    ConsequenceReport,
    DetailedAnalysis,
    IntelligentSolutions,
    PaymentAnalysis,
    RecommendedApproach,
    ReportWarning,
    RiskLevel,
)

HIGH_RISK_SCORE = 60
MODERATE_RISK_SCORE = 30


def _high_severity_count(model: ConsequenceModel) -> int:
    return sum(1 for effect in model.cascade_effects if effect.severity == RiskLevel.HIGH)


def determine_execution_feasibility(payment_analysis: PaymentAnalysis, model: ConsequenceModel) -> bool:
    """
    A scenario is feasible when:
    - the fallback sequence covers the full required amount
    - additional costs stay within half the required amount
    - fewer than two high-severity cascade effects are triggered
    """
    can_cover_amount = payment_analysis.total_covered >= payment_analysis.required_amount
    consequences_too_high = model.total_additional_costs > payment_analysis.required_amount * 0.5
    return can_cover_amount and not consequences_too_high and _high_severity_count(model) < 2


def calculate_risk_score(payment_analysis: PaymentAnalysis, model: ConsequenceModel) -> int:
    """
    Weighted risk score (higher is riskier).

    Weights:
    - 30: shortfall above half the required amount
    - 25: additional costs above 30% of the required amount
    - 20: any overdraft fee
    - 15: any card above 50% utilization
    - 10: per high-severity cascade effect
    """
    required_amount = payment_analysis.required_amount
    score = 0

    if payment_analysis.shortfall > required_amount * 0.5:
        score += 30

    if model.total_additional_costs > required_amount * 0.3:
        score += 25

    if model.overdraft_fees:
        score += 20

    if any(u.utilization_rate > 50 for u in model.credit_utilization.values()):
        score += 15

    score += _high_severity_count(model) * 10

    return score


def determine_risk_level(risk_score: int) -> RiskLevel:
    """Band a risk score: 60+ high, 30-59 moderate, below 30 low"""
    if risk_score >= HIGH_RISK_SCORE:
        return RiskLevel.HIGH
    elif risk_score >= MODERATE_RISK_SCORE:
        return RiskLevel.MODERATE
    else:
        return RiskLevel.LOW


def select_recommended_approach(solutions: IntelligentSolutions, execution_feasible: bool) -> RecommendedApproach:
    if not execution_feasible:
        if solutions.alternative_approaches:
            alternative = solutions.alternative_approaches[0]
            return RecommendedApproach(
                type=alternative.type,
                title=alternative.title,
                description=alternative.description,
                cost_reduction=alternative.cost_reduction,
                risk_reduction=alternative.risk_reduction,
            )
        return RecommendedApproach(
            type="not_recommended",
            title="Scenario execution not recommended",
            description="Financial consequences too severe for current situation",
        )

    optimal = solutions.optimal_payment_method
    if optimal is not None:
        return RecommendedApproach(
            type="optimal_payment",
            title="Proceed with optimal payment method",
            description=f"Use {optimal.account.name}",
            estimated_cost=optimal.cost,
        )

    return RecommendedApproach(
        type="standard_approach",
        title="Proceed with caution",
        description="Monitor financial impact closely",
    )


def generate_warnings(payment_analysis: PaymentAnalysis, model: ConsequenceModel) -> Tuple[ReportWarning, ...]:
    warnings: List[ReportWarning] = []

    if payment_analysis.shortfall > 0:
        warnings.append(
            ReportWarning(
                type="insufficient_funds",
                severity=RiskLevel.HIGH,
                message=f"Insufficient funds: ${payment_analysis.shortfall:,.2f} shortfall detected",
            )
        )

    if model.total_overdraft_costs > 0:
        warnings.append(
            ReportWarning(
                type="overdraft_fees",
                severity=RiskLevel.HIGH,
                message=f"Potential overdraft fees: ${model.total_overdraft_costs:,.2f}",
            )
        )

    if any(u.utilization_rate > HIGH_UTILIZATION_PERCENT for u in model.credit_utilization.values()):
        warnings.append(
            ReportWarning(
                type="high_credit_utilization",
                severity=RiskLevel.MODERATE,
                message="High credit utilization may impact credit score",
            )
        )

    return tuple(warnings)


def generate_next_steps(execution_feasible: bool, solutions: IntelligentSolutions) -> Tuple[str, ...]:
    if execution_feasible:
        steps = [
            "Review optimal payment method details",
            "Implement recommended risk mitigation strategies",
            "Monitor financial impact after execution",
        ]
    else:
        steps = [
            "Consider alternative approaches",
            "Build additional financial capacity",
            "Reassess scenario in 3-6 months",
        ]

    for optimization in solutions.cost_optimizations:
        steps.append(f"Consider {optimization.type}: {optimization.description}")

    return tuple(steps)


def synthesize_report(
    payment_analysis: PaymentAnalysis,
    model: ConsequenceModel,
    solutions: IntelligentSolutions,
) -> ConsequenceReport:
    """Stage 6: assemble the final verdict from every earlier stage"""
    execution_feasible = determine_execution_feasibility(payment_analysis, model)
    risk_score = calculate_risk_score(payment_analysis, model)

    return ConsequenceReport(
        execution_feasible=execution_feasible,
        total_cost=payment_analysis.required_amount + model.total_additional_costs,
        scenario_cost=payment_analysis.required_amount,
        additional_costs=model.total_additional_costs,
        risk_score=risk_score,
        risk_level=determine_risk_level(risk_score),
        recommended_approach=select_recommended_approach(solutions, execution_feasible),
        warnings=generate_warnings(payment_analysis, model),
        next_steps=generate_next_steps(execution_feasible, solutions),
        detailed_analysis=DetailedAnalysis(
            payment_analysis=payment_analysis,
            consequences=model,
            solutions=solutions,
        ),
    )
