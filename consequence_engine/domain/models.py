"""Domain models - immutable dataclasses for consequence analysis inputs and results"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


class AccountType(str, Enum):
    """Account kinds the engine knows how to draw on"""

    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT_CARD = "credit_card"
    INVESTMENT = "investment"
    MONEY_MARKET = "money_market"
    LINE_OF_CREDIT = "line_of_credit"


LIQUID_ACCOUNT_TYPES = (AccountType.CHECKING, AccountType.SAVINGS)


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    CREDIT_CARD = "credit_card"


class RiskLevel(str, Enum):
    """Ordered risk tiers: low < moderate < high"""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return RISK_ORDER[self]


RISK_ORDER = {RiskLevel.LOW: 0, RiskLevel.MODERATE: 1, RiskLevel.HIGH: 2}


@dataclass(frozen=True)
class OverdraftFeeSchedule:
    """Bank overdraft fee structure for a checking account"""

    per_occurrence: float = 35.0
    max_per_day: int = 6
    max_per_month: int = 30


@dataclass(frozen=True)
class Account:
    """Read-only account snapshot supplied by the caller"""

    id: str
    name: str
    type: str  # AccountType value; unknown kinds are carried but never drawn on
    current_balance: float = 0.0
    credit_limit: Optional[float] = None
    interest_rate: Optional[float] = None  # APR as a fraction, e.g. 0.18
    overdraft_fee_schedule: Optional[OverdraftFeeSchedule] = None
    nsf_fee: Optional[float] = None
    daily_overdraft_fee: Optional[float] = None
    monthly_deposits: Optional[float] = None
    is_active: bool = True

    @property
    def available_credit(self) -> float:
        return (self.credit_limit or 0.0) - self.current_balance

    @property
    def utilization_ratio(self) -> float:
        limit = self.credit_limit or 0.0
        return self.current_balance / limit if limit > 0 else 0.0


@dataclass(frozen=True)
class FinancialContext:
    """Household cash-flow picture used for cascade analysis"""

    monthly_income: float = 0.0
    monthly_expenses: float = 0.0
    emergency_fund: float = 0.0
    payment_preferences: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PaymentStep:
    """One draw in the fallback payment sequence"""

    step_index: int
    account: Account
    amount: float
    overdraft_amount: float
    payment_method: PaymentMethod


@dataclass(frozen=True)
class PaymentAnalysis:
    """Output of payment capacity analysis"""

    required_amount: float
    primary_account: Optional[Account]
    available_funds: float
    shortfall: float  # required amount the primary account cannot cover
    fallback_sequence: Tuple[PaymentStep, ...]
    total_covered: float
    uncovered_amount: float  # required amount no account could cover


@dataclass(frozen=True)
class OverdraftConsequence:
    """Fees triggered by overdrawing a checking account"""

    account_id: str
    account_name: str
    overdraft_amount: float
    overdraft_fee: float
    nsf_charges: float
    total_cost: float
    daily_fees: float
    projected_duration: int  # days until deposits clear the overdraft


@dataclass(frozen=True)
class CreditUtilization:
    """Utilization of a credit card after the charge"""

    account_name: str
    previous_balance: float
    new_balance: float
    credit_limit: float
    utilization_rate: float  # percent
    utilization_impact: RiskLevel


@dataclass(frozen=True)
class InterestProjection:
    """Result of amortizing a balance under minimum payments"""

    monthly_interest: float
    yearly_interest: float
    payoff_months: float  # math.inf when not paid off inside the horizon


@dataclass(frozen=True)
class InterestCost:
    """Projected interest for a charged credit card"""

    account_name: str
    charge_amount: float
    monthly_interest: float
    yearly_interest: float
    minimum_payment: float
    payoff_time: float


@dataclass(frozen=True)
class EmergencyFundImpact:
    """How far a shortfall would eat into the emergency fund"""

    impact: str  # none | minimal | noticeable | moderate | severe
    amount: float
    reduction_percentage: float = 0.0
    remaining_fund: float = 0.0


@dataclass(frozen=True)
class CascadeEffect:
    """Second-order consequence of the payment decision"""

    type: str
    severity: RiskLevel
    description: str
    financial_impact: float
    risk_level: RiskLevel


@dataclass(frozen=True)
class ConsequenceModel:
    """Accumulated penalties, credit effects and cascade risks"""

    overdraft_fees: Tuple[OverdraftConsequence, ...] = ()
    total_overdraft_costs: float = 0.0
    credit_utilization: Dict[str, CreditUtilization] = field(default_factory=dict)
    interest_costs: Dict[str, InterestCost] = field(default_factory=dict)
    total_credit_costs: float = 0.0
    cascade_effects: Tuple[CascadeEffect, ...] = ()
    total_additional_costs: float = 0.0


@dataclass(frozen=True)
class OptimalPaymentMethod:
    step_index: int
    account: Account
    cost: float
    risk_level: RiskLevel


@dataclass(frozen=True)
class PaymentPhase:
    """Single monthly instalment of a phased implementation"""

    month: int
    amount: float


@dataclass(frozen=True)
class AlternativeApproach:
    type: str
    title: str
    description: str
    cost_reduction: float
    risk_reduction: RiskLevel
    phases: Tuple[PaymentPhase, ...] = ()


@dataclass(frozen=True)
class RiskMitigation:
    type: str
    priority: RiskLevel
    description: str
    implementation: str


@dataclass(frozen=True)
class CostOptimization:
    type: str
    description: str
    potential_saving: float


@dataclass(frozen=True)
class IntelligentSolutions:
    """Ranked payment options and strategies"""

    optimal_payment_method: Optional[OptimalPaymentMethod]
    alternative_approaches: Tuple[AlternativeApproach, ...]
    risk_mitigation: Tuple[RiskMitigation, ...]
    cost_optimizations: Tuple[CostOptimization, ...]


@dataclass(frozen=True)
class RecommendedApproach:
    type: str
    title: str
    description: str
    estimated_cost: Optional[float] = None
    cost_reduction: Optional[float] = None
    risk_reduction: Optional[RiskLevel] = None


@dataclass(frozen=True)
class ReportWarning:
    type: str
    severity: RiskLevel
    message: str


@dataclass(frozen=True)
class DetailedAnalysis:
    payment_analysis: PaymentAnalysis
    consequences: ConsequenceModel
    solutions: IntelligentSolutions


@dataclass(frozen=True)
class ConsequenceReport:
    """Final feasibility verdict and recommendation"""

    execution_feasible: bool
    total_cost: float
    scenario_cost: float
    additional_costs: float
    risk_score: int
    risk_level: RiskLevel
    recommended_approach: RecommendedApproach
    warnings: Tuple[ReportWarning, ...]
    next_steps: Tuple[str, ...]
    detailed_analysis: DetailedAnalysis


@dataclass(frozen=True)
class PhaseError:
    """Failure recorded by a pipeline stage"""

    phase: str
    error: str
    timestamp: float


@dataclass(frozen=True)
class AnalysisMetadata:
    execution_time: float  # milliseconds
    phases: Tuple[str, ...]
    errors: Tuple[PhaseError, ...] = ()


@dataclass(frozen=True)
class AnalysisSuccess:
    result: ConsequenceReport
    metadata: AnalysisMetadata
    success: bool = True


@dataclass(frozen=True)
class AnalysisFailure:
    error: str
    execution_time: float
    errors: Tuple[PhaseError, ...] = ()
    success: bool = False
