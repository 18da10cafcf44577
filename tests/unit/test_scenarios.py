"""Unit tests for scenario parameter parsing and required-amount resolution"""

import math
import pytest
from consequence_engine.domain.exceptions import InvalidScenarioError
from consequence_engine.domain.scenarios import (
    GenericParameters,
    HomePurchaseParameters,
    MajorPurchaseParameters,
    Scenario,
    ScenarioType,
    build_scenario,
    resolve_required_amount,
)


def required(scenario_type, parameters):
    return resolve_required_amount(build_scenario("scn", "Test", scenario_type, parameters))


def test_home_purchase_adds_down_payment_and_closing_costs():
    """Test home purchase needs both the down payment and closing costs"""
    assert required("home_purchase", {"downPayment": 40000, "closingCosts": 8000}) == 48000


def test_car_purchase_zero_down_payment_falls_back_to_total_price():
    """Test a zero down payment falls through to the total price"""
    assert required("car_purchase", {"downPayment": 0, "totalPrice": 25000}) == 25000
    assert required("car_purchase", {"downPayment": 5000, "totalPrice": 25000}) == 5000


def test_investment_prefers_initial_investment():
    assert required("investment", {"initialInvestment": 1500, "investmentAmount": 900}) == 1500
    assert required("investment", {"investmentAmount": 900}) == 900


def test_debt_payoff_falls_back_to_current_balance():
    assert required("debt_payoff", {"currentBalance": 3200}) == 3200


def test_major_purchase_and_emergency_expense_fallbacks():
    """Test both kinds accept the generic 'amount' key"""
    assert required("major_purchase", {"purchaseAmount": 5000}) == 5000
    assert required("major_purchase", {"amount": 1200}) == 1200
    assert required("emergency_expense", {"expenseAmount": 3000}) == 3000
    assert required("emergency_expense", {"amount": 750}) == 750


def test_unknown_type_resolves_through_generic_record():
    """Test unrecognized scenario types degrade to amount, then total amount, then 0"""
    assert required("vacation", {"amount": 2200}) == 2200
    assert required("vacation", {"totalAmount": 700}) == 700
    assert required("vacation", {}) == 0
    assert required("vacation", None) == 0


def test_snake_case_keys_accepted():
    assert required("home_purchase", {"down_payment": 10000, "closing_costs": 2500}) == 12500


def test_undeclared_and_null_parameters_ignored():
    """Test extra keys are ignored and null amounts default to 0"""
    scenario = build_scenario("scn", "Desk", "major_purchase", {"purchaseAmount": None, "amount": 300, "color": "oak"})

    assert scenario.parameters == MajorPurchaseParameters(purchase_amount=0.0, amount=300.0)
    assert resolve_required_amount(scenario) == 300


def test_negative_amount_clamped_to_zero():
    assert required("major_purchase", {"purchaseAmount": -250}) == 0


@pytest.mark.parametrize("bad_value", ["5000", True, math.nan, math.inf, [100]])
def test_malformed_amount_rejected(bad_value):
    """Test non-numeric, boolean and non-finite amounts are rejected"""
    with pytest.raises(InvalidScenarioError):
        build_scenario("scn", "Bad", "major_purchase", {"purchaseAmount": bad_value})


def test_enum_scenario_type_normalized():
    """Test passing the enum member behaves like its string value"""
    scenario = build_scenario("scn", "House", ScenarioType.HOME_PURCHASE, {"downPayment": 1000})

    assert scenario.type == "home_purchase"
    assert isinstance(scenario.parameters, HomePurchaseParameters)
    assert resolve_required_amount(scenario) == 1000


def test_mismatched_parameter_record_rejected():
    """Test a record built for another type is refused instead of misread"""
    scenario = Scenario(id="scn", name="Mixed", type="home_purchase", parameters=GenericParameters(amount=500))

    with pytest.raises(InvalidScenarioError):
        resolve_required_amount(scenario)


@pytest.mark.parametrize(
    "scenario_type,parameters",
    [
        ("home_purchase", {"downPayment": 40000, "amount": 35000}),
        ("car_purchase", {"totalPrice": 25000, "amount": 18000}),
        ("investment", {"initialInvestment": 5000, "amount": 2500}),
        ("debt_payoff", {"payoffAmount": 8000, "amount": 6000}),
        ("emergency_expense", {"expenseAmount": 3000, "amount": 1500}),
    ],
)
def test_every_kind_carries_scalable_amount(scenario_type, parameters):
    """Test 'amount' is kept for every kind without changing the required amount"""
    scenario = build_scenario("scn", "Test", scenario_type, parameters)

    assert scenario.parameters.scalable_amount() == parameters["amount"]
    assert resolve_required_amount(scenario) != parameters["amount"]


def test_major_purchase_scalable_amount_falls_back_to_purchase_amount():
    scenario = build_scenario("scn", "Boat", "major_purchase", {"purchaseAmount": 9000})
    assert scenario.parameters.scalable_amount() == 9000
