"""Unit tests for feasibility, risk banding and report synthesis"""

import pytest
from consequence_engine.domain.models import (
    AlternativeApproach,
    CascadeEffect,
    ConsequenceModel,
    CostOptimization,
    CreditUtilization,
    IntelligentSolutions,
    OptimalPaymentMethod,
    OverdraftConsequence,
    PaymentAnalysis,
    RiskLevel,
)
from consequence_engine.domain.report import (
    calculate_risk_score,
    determine_execution_feasibility,
    determine_risk_level,
    generate_next_steps,
    generate_warnings,
    select_recommended_approach,
    synthesize_report,
)
from tests.conftest import checking


def payment_analysis(required_amount=1000.0, shortfall=0.0, total_covered=None) -> PaymentAnalysis:
    covered = required_amount if total_covered is None else total_covered
    return PaymentAnalysis(
        required_amount=required_amount,
        primary_account=None,
        available_funds=required_amount - shortfall,
        shortfall=shortfall,
        fallback_sequence=(),
        total_covered=covered,
        uncovered_amount=max(0.0, required_amount - covered),
    )


def high_effect(effect_type="cash_flow_stress"):
    return CascadeEffect(effect_type, RiskLevel.HIGH, "stress", 0.0, RiskLevel.HIGH)


OVERDRAFT = OverdraftConsequence("chk", "Checking", 500, 35, 30, 65, 5, 8)


def empty_solutions(**kwargs) -> IntelligentSolutions:
    values = dict(optimal_payment_method=None, alternative_approaches=(), risk_mitigation=(), cost_optimizations=())
    values.update(kwargs)
    return IntelligentSolutions(**values)


@pytest.mark.parametrize(
    "score,expected",
    [
        (0, RiskLevel.LOW),
        (29, RiskLevel.LOW),
        (30, RiskLevel.MODERATE),
        (59, RiskLevel.MODERATE),
        (60, RiskLevel.HIGH),
        (100, RiskLevel.HIGH),
    ],
)
def test_risk_level_boundaries(score, expected):
    assert determine_risk_level(score) == expected


class TestFeasibility:
    def test_covered_and_cheap_is_feasible(self):
        assert determine_execution_feasibility(payment_analysis(), ConsequenceModel(total_additional_costs=500))

    def test_uncovered_is_not_feasible(self):
        assert not determine_execution_feasibility(payment_analysis(total_covered=900), ConsequenceModel())

    def test_costs_above_half_not_feasible(self):
        assert not determine_execution_feasibility(payment_analysis(), ConsequenceModel(total_additional_costs=500.01))

    def test_two_high_severity_effects_not_feasible(self):
        one = ConsequenceModel(cascade_effects=(high_effect(),))
        two = ConsequenceModel(cascade_effects=(high_effect(), high_effect("emergency_fund_depletion")))

        assert determine_execution_feasibility(payment_analysis(), one)
        assert not determine_execution_feasibility(payment_analysis(), two)


class TestRiskScore:
    def test_clean_scenario_scores_zero(self):
        assert calculate_risk_score(payment_analysis(), ConsequenceModel()) == 0

    def test_all_weights(self):
        model = ConsequenceModel(
            overdraft_fees=(OVERDRAFT,),
            credit_utilization={"cc": CreditUtilization("Card", 0, 3000, 5000, 60.0, RiskLevel.HIGH)},
            cascade_effects=(high_effect(), high_effect("emergency_fund_depletion")),
            total_additional_costs=400,
        )
        assert calculate_risk_score(payment_analysis(shortfall=600), model) == 30 + 25 + 20 + 15 + 20

    def test_thresholds_are_strict(self):
        model = ConsequenceModel(
            credit_utilization={"cc": CreditUtilization("Card", 0, 2500, 5000, 50.0, RiskLevel.HIGH)},
            total_additional_costs=300,
        )
        assert calculate_risk_score(payment_analysis(shortfall=500), model) == 0


class TestRecommendedApproach:
    def test_feasible_uses_optimal_method(self):
        optimal = OptimalPaymentMethod(1, checking("chk", 3000, name="Everyday Checking"), 0.0, RiskLevel.LOW)
        approach = select_recommended_approach(empty_solutions(optimal_payment_method=optimal), True)

        assert approach.type == "optimal_payment"
        assert approach.description == "Use Everyday Checking"
        assert approach.estimated_cost == 0

    def test_feasible_without_optimal_is_standard(self):
        assert select_recommended_approach(empty_solutions(), True).type == "standard_approach"

    def test_infeasible_uses_first_alternative(self):
        alternative = AlternativeApproach("delayed_execution", "Delay", "Save first", 80.0, RiskLevel.HIGH)
        approach = select_recommended_approach(empty_solutions(alternative_approaches=(alternative,)), False)

        assert approach.type == "delayed_execution"
        assert approach.cost_reduction == 80
        assert approach.risk_reduction == RiskLevel.HIGH

    def test_infeasible_without_alternatives_not_recommended(self):
        assert select_recommended_approach(empty_solutions(), False).type == "not_recommended"


def test_warnings_format_amounts():
    model = ConsequenceModel(
        overdraft_fees=(OVERDRAFT,),
        total_overdraft_costs=1234.5,
        credit_utilization={"cc": CreditUtilization("Card", 0, 2000, 5000, 40.0, RiskLevel.HIGH)},
    )
    warnings = generate_warnings(payment_analysis(required_amount=5000, shortfall=2500), model)

    assert [w.type for w in warnings] == ["insufficient_funds", "overdraft_fees", "high_credit_utilization"]
    assert warnings[0].message == "Insufficient funds: $2,500.00 shortfall detected"
    assert warnings[1].message == "Potential overdraft fees: $1,234.50"
    assert warnings[2].severity == RiskLevel.MODERATE


def test_no_warnings_for_clean_scenario():
    assert generate_warnings(payment_analysis(), ConsequenceModel()) == ()


def test_next_steps_include_optimizations():
    solutions = empty_solutions(
        cost_optimizations=(CostOptimization("payment_timing", "Time large expenses after payroll deposits", 0.0),),
    )
    feasible_steps = generate_next_steps(True, solutions)
    infeasible_steps = generate_next_steps(False, solutions)

    assert feasible_steps[0] == "Review optimal payment method details"
    assert infeasible_steps[0] == "Consider alternative approaches"
    assert feasible_steps[-1] == "Consider payment_timing: Time large expenses after payroll deposits"
    assert len(feasible_steps) == 4


def test_synthesize_report_totals():
    model = ConsequenceModel(overdraft_fees=(OVERDRAFT,), total_overdraft_costs=65, total_additional_costs=65)
    report = synthesize_report(payment_analysis(required_amount=1000, shortfall=500), model, empty_solutions())

    assert report.scenario_cost == 1000
    assert report.additional_costs == 65
    assert report.total_cost == 1065
    assert report.risk_score == 20
    assert report.risk_level == RiskLevel.LOW
    assert report.execution_feasible
    assert report.detailed_analysis.consequences is model
