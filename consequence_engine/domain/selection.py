"""Payment capacity analysis - primary account choice and fallback payment sequencing"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

from consequence_engine.domain.exceptions import InvalidAccountError
from consequence_engine.domain.models import (
    Account,
    AccountType,
    LIQUID_ACCOUNT_TYPES,
    PaymentAnalysis,
    PaymentMethod,
    PaymentStep,
)
from consequence_engine.domain.scenarios import Scenario, ScenarioType, resolve_required_amount, type_key

# Account types tried in order when picking the account a scenario is paid from
PRIMARY_ACCOUNT_PREFERENCES: Dict[str, Tuple[str, ...]] = {
    ScenarioType.HOME_PURCHASE.value: (AccountType.CHECKING.value, AccountType.SAVINGS.value),
    ScenarioType.CAR_PURCHASE.value: (AccountType.CHECKING.value, AccountType.SAVINGS.value),
    ScenarioType.INVESTMENT.value: (AccountType.CHECKING.value, AccountType.INVESTMENT.value),
    ScenarioType.DEBT_PAYOFF.value: (AccountType.CHECKING.value,),
    ScenarioType.MAJOR_PURCHASE.value: (AccountType.CHECKING.value,),
    ScenarioType.EMERGENCY_EXPENSE.value: (AccountType.CHECKING.value, AccountType.SAVINGS.value),
}
DEFAULT_PREFERENCES = (AccountType.CHECKING.value,)

# Revolving credit is never the primary account; only credit cards are drawn, in the credit pass
CREDIT_ACCOUNT_TYPES = (AccountType.CREDIT_CARD, AccountType.LINE_OF_CREDIT)

_OPTIONAL_AMOUNTS = ("credit_limit", "interest_rate", "nsf_fee", "daily_overdraft_fee", "monthly_deposits")


def _require_number(account: Account, name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidAccountError(f"Account '{account.id}' has invalid {name}: {value!r}")
    return value


def validate_accounts(accounts: Sequence[Account]) -> None:
    """
    Reject malformed account snapshots.

    Missing optional amounts are fine (they fall back to documented defaults). Present
    values must be finite numbers; limits, rates and fees must not be negative. Account
    ids must be unique so an account can appear at most once in a sequence.

    Raises:
        InvalidAccountError: On the first malformed account
    """
    seen_ids = set()
    for account in accounts:
        if account.id in seen_ids:
            raise InvalidAccountError(f"Duplicate account id '{account.id}'")
        seen_ids.add(account.id)

        _require_number(account, "current_balance", account.current_balance)

        for name in _OPTIONAL_AMOUNTS:
            value = getattr(account, name)
            if value is None:
                continue
            if _require_number(account, name, value) < 0:
                raise InvalidAccountError(f"Account '{account.id}' has negative {name}: {value!r}")

        schedule = account.overdraft_fee_schedule
        if schedule is not None:
            _require_number(account, "overdraft_fee_schedule.per_occurrence", schedule.per_occurrence)
            _require_number(account, "overdraft_fee_schedule.max_per_day", schedule.max_per_day)
            if schedule.per_occurrence < 0 or schedule.max_per_day < 0:
                raise InvalidAccountError(f"Account '{account.id}' has a negative overdraft fee schedule")


def find_primary_account(accounts: Sequence[Account], scenario_type: str) -> Optional[Account]:
    """
    Pick the account a scenario is paid from.

    Order: the scenario's preferred account types, then the first active checking
    account, then the first active non-credit account. Inactive accounts are never chosen.
    """
    candidates = [
        account for account in accounts
        if account.is_active and account.type not in CREDIT_ACCOUNT_TYPES
    ]

    for preferred_type in PRIMARY_ACCOUNT_PREFERENCES.get(type_key(scenario_type), DEFAULT_PREFERENCES):
        for account in candidates:
            if account.type == preferred_type:
                return account

    for account in candidates:
        if account.type == AccountType.CHECKING:
            return account

    return candidates[0] if candidates else None


def _to_cents(amount: float) -> int:
    return round(amount * 100)


def _from_cents(cents: int) -> float:
    return cents / 100


def build_fallback_sequence(
    accounts: Sequence[Account],
    required_amount: float,
    primary_account: Optional[Account],
) -> Tuple[PaymentStep, ...]:
    """
    Build the ordered list of draws covering the required amount.

    Passes:
    1. Primary account: draw what its balance allows; the rest is recorded as that
       step's overdraft amount (the only place an overdraft originates)
    2. Other active liquid accounts with a positive balance, largest balance first
    3. Active credit cards with available credit, lowest utilization first

    Lines of credit are never drawn. Ties keep the caller's account order. Draws are
    counted in whole cents so they sum exactly to the required amount when capacity
    allows. Stops as soon as nothing remains and never emits a step that draws nothing,
    except a primary step that carries an overdraft.
    """
    steps: List[PaymentStep] = []
    remaining = _to_cents(required_amount)

    def add_step(account: Account, drawn: int, overdraft: int, method: PaymentMethod) -> None:
        steps.append(
            PaymentStep(
                step_index=len(steps) + 1,
                account=account,
                amount=_from_cents(drawn),
                overdraft_amount=_from_cents(overdraft),
                payment_method=method,
            )
        )

    # 1. Primary account
    if primary_account is not None and remaining > 0:
        drawn = min(max(_to_cents(primary_account.current_balance), 0), remaining)
        overdraft = remaining - drawn
        if drawn > 0 or overdraft > 0:
            add_step(primary_account, drawn, overdraft, PaymentMethod.BANK_TRANSFER)
        remaining -= drawn

    # 2. Secondary liquid accounts
    if remaining > 0:
        liquid_accounts = sorted(
            (
                account for account in accounts
                if (primary_account is None or account.id != primary_account.id)
                and account.type in LIQUID_ACCOUNT_TYPES
                and account.is_active
                and _to_cents(account.current_balance) > 0
            ),
            key=lambda account: -account.current_balance,
        )
        for account in liquid_accounts:
            if remaining <= 0:
                break
            drawn = min(_to_cents(account.current_balance), remaining)
            add_step(account, drawn, 0, PaymentMethod.BANK_TRANSFER)
            remaining -= drawn

    # 3. Credit cards
    if remaining > 0:
        credit_cards = sorted(
            (
                account for account in accounts
                if account.type == AccountType.CREDIT_CARD
                and account.is_active
                and _to_cents(account.available_credit) > 0
            ),
            key=lambda account: account.utilization_ratio,
        )
        for card in credit_cards:
            if remaining <= 0:
                break
            charge = min(_to_cents(card.available_credit), remaining)
            add_step(card, charge, 0, PaymentMethod.CREDIT_CARD)
            remaining -= charge

    return tuple(steps)


def analyze_payment_capacity(scenario: Scenario, accounts: Sequence[Account]) -> PaymentAnalysis:
    """
    Stage 1: resolve the required amount and how it would be paid.

    Money is settled in whole cents here, so coverage compares exactly against the
    required amount.

    Raises:
        InvalidAccountError: Malformed account snapshot
        InvalidScenarioError: Scenario parameters do not match its type
    """
    validate_accounts(accounts)

    required_cents = _to_cents(resolve_required_amount(scenario))
    primary_account = find_primary_account(accounts, scenario.type)
    available_cents = _to_cents(primary_account.current_balance) if primary_account is not None else 0

    fallback_sequence = build_fallback_sequence(accounts, _from_cents(required_cents), primary_account)
    covered_cents = sum(_to_cents(step.amount) for step in fallback_sequence)

    return PaymentAnalysis(
        required_amount=_from_cents(required_cents),
        primary_account=primary_account,
        available_funds=_from_cents(available_cents),
        shortfall=_from_cents(max(0, required_cents - available_cents)),
        fallback_sequence=fallback_sequence,
        total_covered=_from_cents(covered_cents),
        uncovered_amount=_from_cents(max(0, required_cents - covered_cents)),
    )
