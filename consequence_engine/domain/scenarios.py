"""Scenario kinds, typed parameter records and required-amount resolution"""

import math
import re
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Callable, Dict, Mapping, NamedTuple, Optional, Type

from consequence_engine.domain.exceptions import InvalidScenarioError


class ScenarioType(str, Enum):
    """Scenario kinds with a dedicated parameter record"""

    HOME_PURCHASE = "home_purchase"
    CAR_PURCHASE = "car_purchase"
    INVESTMENT = "investment"
    DEBT_PAYOFF = "debt_payoff"
    MAJOR_PURCHASE = "major_purchase"
    EMERGENCY_EXPENSE = "emergency_expense"


@dataclass(frozen=True)
class ScenarioParameters:
    """Base record for type-specific scenario parameters; every kind may carry a generic amount"""

    amount: float = 0.0

    def scalable_amount(self) -> float:
        """Amount-like parameter a scaled-down version could shrink (0 when absent)"""
        return self.amount


@dataclass(frozen=True)
class HomePurchaseParameters(ScenarioParameters):
    down_payment: float = 0.0
    closing_costs: float = 0.0


@dataclass(frozen=True)
class CarPurchaseParameters(ScenarioParameters):
    down_payment: float = 0.0
    total_price: float = 0.0


@dataclass(frozen=True)
class InvestmentParameters(ScenarioParameters):
    initial_investment: float = 0.0
    investment_amount: float = 0.0


@dataclass(frozen=True)
class DebtPayoffParameters(ScenarioParameters):
    payoff_amount: float = 0.0
    current_balance: float = 0.0


@dataclass(frozen=True)
class MajorPurchaseParameters(ScenarioParameters):
    purchase_amount: float = 0.0

    def scalable_amount(self) -> float:
        return self.amount or self.purchase_amount


@dataclass(frozen=True)
class EmergencyExpenseParameters(ScenarioParameters):
    expense_amount: float = 0.0


@dataclass(frozen=True)
class GenericParameters(ScenarioParameters):
    """Parameters for scenario kinds without a dedicated record"""

    total_amount: float = 0.0


@dataclass(frozen=True)
class Scenario:
    """Discretionary financial scenario to analyze"""

    id: str
    name: str
    type: str
    parameters: ScenarioParameters


# "A else B" below means the first non-zero value, matching how the amounts are entered:
# a zero down payment falls through to the total price.


def _resolve_home_purchase(p: HomePurchaseParameters) -> float:
    return p.down_payment + p.closing_costs


def _resolve_car_purchase(p: CarPurchaseParameters) -> float:
    return p.down_payment or p.total_price


def _resolve_investment(p: InvestmentParameters) -> float:
    return p.initial_investment or p.investment_amount


def _resolve_debt_payoff(p: DebtPayoffParameters) -> float:
    return p.payoff_amount or p.current_balance


def _resolve_major_purchase(p: MajorPurchaseParameters) -> float:
    return p.purchase_amount or p.amount


def _resolve_emergency_expense(p: EmergencyExpenseParameters) -> float:
    return p.expense_amount or p.amount


def _resolve_generic(p: GenericParameters) -> float:
    return p.amount or p.total_amount


class ScenarioKind(NamedTuple):
    parameters_class: Type[ScenarioParameters]
    resolve: Callable[[Any], float]


SCENARIO_KINDS: Dict[str, ScenarioKind] = {
    ScenarioType.HOME_PURCHASE.value: ScenarioKind(HomePurchaseParameters, _resolve_home_purchase),
    ScenarioType.CAR_PURCHASE.value: ScenarioKind(CarPurchaseParameters, _resolve_car_purchase),
    ScenarioType.INVESTMENT.value: ScenarioKind(InvestmentParameters, _resolve_investment),
    ScenarioType.DEBT_PAYOFF.value: ScenarioKind(DebtPayoffParameters, _resolve_debt_payoff),
    ScenarioType.MAJOR_PURCHASE.value: ScenarioKind(MajorPurchaseParameters, _resolve_major_purchase),
    ScenarioType.EMERGENCY_EXPENSE.value: ScenarioKind(EmergencyExpenseParameters, _resolve_emergency_expense),
}

GENERIC_KIND = ScenarioKind(GenericParameters, _resolve_generic)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def type_key(scenario_type: str) -> str:
    """Plain string key for a scenario type (enum members hash by name, not value)"""
    return scenario_type.value if isinstance(scenario_type, Enum) else scenario_type


def kind_for(scenario_type: str) -> ScenarioKind:
    """Look up the parameter record and resolver for a scenario type; unknown types are generic"""
    return SCENARIO_KINDS.get(type_key(scenario_type), GENERIC_KIND)


def _snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _coerce_amount(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidScenarioError(f"Scenario parameter '{name}' must be numeric, got {value!r}")
    if not math.isfinite(value):
        raise InvalidScenarioError(f"Scenario parameter '{name}' must be finite, got {value!r}")
    return float(value)


def parse_parameters(scenario_type: str, raw: Optional[Mapping[str, Any]]) -> ScenarioParameters:
    """
    Build the typed parameter record for a scenario type from a free-form mapping.

    Keys may be camelCase or snake_case. Keys the record does not declare are ignored,
    missing or null amounts default to 0.

    Raises:
        InvalidScenarioError: A declared amount is non-numeric or non-finite
    """
    parameters_class = kind_for(scenario_type).parameters_class
    normalized = {_snake_case(key): value for key, value in (raw or {}).items()}

    values = {}
    for parameter in fields(parameters_class):
        value = normalized.get(parameter.name)
        if value is None:
            continue
        values[parameter.name] = _coerce_amount(parameter.name, value)

    return parameters_class(**values)


def build_scenario(
    scenario_id: str,
    name: str,
    scenario_type: str,
    parameters: Optional[Mapping[str, Any]] = None,
) -> Scenario:
    """Create a Scenario with parameters parsed for its type"""
    key = type_key(scenario_type)
    return Scenario(id=scenario_id, name=name, type=key, parameters=parse_parameters(key, parameters))


def resolve_required_amount(scenario: Scenario) -> float:
    """
    Map a scenario to the single dollar amount needed to execute it.

    Unknown scenario types resolve through the generic record (amount, else total amount),
    so an unrecognized type degrades to 0 instead of failing.

    Raises:
        InvalidScenarioError: The parameter record does not belong to the scenario's type
    """
    kind = kind_for(scenario.type)
    if not isinstance(scenario.parameters, kind.parameters_class):
        raise InvalidScenarioError(
            f"Scenario '{scenario.id}' of type '{type_key(scenario.type)}' "
            f"expects {kind.parameters_class.__name__}, got {type(scenario.parameters).__name__}"
        )
    return max(0.0, kind.resolve(scenario.parameters))
