"""Unit tests for overdraft and NSF fee modeling"""

import pytest
from consequence_engine.domain.models import OverdraftFeeSchedule
from consequence_engine.domain.overdraft import (
    calculate_daily_overdraft_fee,
    calculate_nsf_charges,
    calculate_overdraft_fee,
    estimate_overdraft_duration,
    model_overdraft_consequences,
)
from consequence_engine.domain.scenarios import build_scenario
from consequence_engine.domain.selection import analyze_payment_capacity
from tests.conftest import checking, savings


@pytest.mark.parametrize(
    "overdraft_amount,expected_fee",
    [
        (0, 0),
        (300, 35),
        (500, 35),  # surcharge only above $500
        (999, 45),
        (1200, 55),
        (2500, 85),
        (13000, 210),  # capped at 6 occurrences
    ],
)
def test_overdraft_fee_default_schedule(overdraft_amount, expected_fee):
    assert calculate_overdraft_fee(checking(), overdraft_amount) == expected_fee


def test_overdraft_fee_custom_schedule_cap():
    account = checking(overdraft_fee_schedule=OverdraftFeeSchedule(per_occurrence=20, max_per_day=2))

    assert calculate_overdraft_fee(account, 400) == 20
    assert calculate_overdraft_fee(account, 1200) == 40
    assert calculate_overdraft_fee(account, 5000) == 40


def test_nsf_charges():
    assert calculate_nsf_charges(checking(), 100) == 30
    assert calculate_nsf_charges(checking(nsf_fee=25), 100) == 25
    assert calculate_nsf_charges(checking(nsf_fee=0), 100) == 0
    assert calculate_nsf_charges(checking(), 0) == 0


def test_daily_overdraft_fee_default():
    assert calculate_daily_overdraft_fee(checking()) == 5
    assert calculate_daily_overdraft_fee(checking(daily_overdraft_fee=7.5)) == 7.5


def test_overdraft_duration():
    """Test recovery days from average daily deposits, capped at 30"""
    assert estimate_overdraft_duration(checking(), 500) == 8  # 2000/30 per day
    assert estimate_overdraft_duration(checking(monthly_deposits=3000), 250) == 3
    assert estimate_overdraft_duration(checking(), 2500) == 30
    assert estimate_overdraft_duration(checking(monthly_deposits=0), 500) == 8


def test_model_overdraft_consequences(overdraft_checking):
    """Test $3,000 emergency expense against a $500 checking account"""
    scenario = build_scenario("scn", "Car Repair", "emergency_expense", {"expenseAmount": 3000})
    model = model_overdraft_consequences(analyze_payment_capacity(scenario, [overdraft_checking]))

    assert len(model.overdraft_fees) == 1
    entry = model.overdraft_fees[0]
    assert entry.account_id == "chk-thin"
    assert entry.overdraft_amount == 2500
    assert entry.overdraft_fee == 85
    assert entry.nsf_charges == 30
    assert entry.total_cost == 115
    assert entry.daily_fees == 5
    assert entry.projected_duration == 30
    assert model.total_overdraft_costs == 115


def test_no_overdraft_when_primary_covers(overdraft_checking):
    scenario = build_scenario("scn", "Tires", "emergency_expense", {"expenseAmount": 400})
    model = model_overdraft_consequences(analyze_payment_capacity(scenario, [overdraft_checking]))

    assert model.overdraft_fees == ()
    assert model.total_overdraft_costs == 0


def test_savings_primary_is_not_overdraft_capable():
    """Test an uncovered remainder on savings produces no overdraft fee"""
    scenario = build_scenario("scn", "Roof", "emergency_expense", {"expenseAmount": 3000})
    analysis = analyze_payment_capacity(scenario, [savings("sav", 500)])

    assert analysis.fallback_sequence[0].overdraft_amount == 2500
    assert model_overdraft_consequences(analysis).overdraft_fees == ()
