"""Pytest fixtures for testing"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from consequence_engine.api.main import create_app
from consequence_engine.domain.models import Account, FinancialContext, OverdraftFeeSchedule
from consequence_engine.domain.scenarios import build_scenario


def checking(account_id: str = "checking", balance: float = 0.0, **kwargs) -> Account:
    return Account(id=account_id, name=kwargs.pop("name", "Primary Checking"), type="checking", current_balance=balance, **kwargs)


def savings(account_id: str = "savings", balance: float = 0.0, **kwargs) -> Account:
    return Account(id=account_id, name=kwargs.pop("name", "Savings"), type="savings", current_balance=balance, **kwargs)


def credit_card(
    account_id: str = "card",
    balance: float = 0.0,
    limit: float = 5000.0,
    rate: float | None = 0.18,
    **kwargs,
) -> Account:
    return Account(
        id=account_id,
        name=kwargs.pop("name", "Credit Card"),
        type="credit_card",
        current_balance=balance,
        credit_limit=limit,
        interest_rate=rate,
        **kwargs,
    )


@pytest.fixture
def app() -> FastAPI:
    """Fresh application per test so dependency overrides do not leak"""
    return create_app()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create FastAPI test client"""
    return TestClient(app)


@pytest.fixture
def financial_context() -> FinancialContext:
    """Typical household: $6k income, $4.5k expenses, $10k emergency fund"""
    return FinancialContext(monthly_income=6000, monthly_expenses=4500, emergency_fund=10000)


@pytest.fixture
def major_purchase_scenario():
    """$5,000 major purchase"""
    return build_scenario("scn-major", "New Laptop and Desk", "major_purchase", {"purchaseAmount": 5000})


@pytest.fixture
def mixed_accounts() -> list[Account]:
    """Checking $2,500, savings $3,000 and a card with $6,500 available"""
    return [
        checking("chk-main", 2500),
        savings("sav-main", 3000, name="Emergency Savings"),
        credit_card("cc-main", balance=1500, limit=8000, rate=0.15, name="Everyday Card"),
    ]


@pytest.fixture
def overdraft_checking() -> Account:
    """Thin checking account with an explicit fee schedule"""
    return checking(
        "chk-thin",
        500,
        overdraft_fee_schedule=OverdraftFeeSchedule(per_occurrence=35, max_per_day=6),
        nsf_fee=30,
        daily_overdraft_fee=5,
    )
