"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from consequence_engine.domain.models import (
    Account,
    AnalysisMetadata,
    ConsequenceReport,
    FinancialContext,
    OverdraftFeeSchedule,
)
from consequence_engine.domain.scenarios import Scenario, build_scenario


class OverdraftFeeScheduleSchema(BaseModel):
    """Bank overdraft fee structure"""

    per_occurrence: float = Field(35.0, ge=0)
    max_per_day: int = Field(6, ge=0)
    max_per_month: int = Field(30, ge=0)


class AccountSchema(BaseModel):
    """Account snapshot entry"""

    id: str = Field(..., min_length=1, description="Account identifier")
    name: str
    type: str = Field(..., min_length=1, description="checking, savings, credit_card, investment, ...")
    current_balance: float = 0.0
    credit_limit: Optional[float] = Field(None, ge=0)
    interest_rate: Optional[float] = Field(None, ge=0, description="APR as a fraction, e.g. 0.18")
    overdraft_fee_schedule: Optional[OverdraftFeeScheduleSchema] = None
    nsf_fee: Optional[float] = Field(None, ge=0)
    daily_overdraft_fee: Optional[float] = Field(None, ge=0)
    monthly_deposits: Optional[float] = Field(None, ge=0)
    is_active: bool = True

    def to_domain(self) -> Account:
        schedule = self.overdraft_fee_schedule
        return Account(
            id=self.id,
            name=self.name,
            type=self.type,
            current_balance=self.current_balance,
            credit_limit=self.credit_limit,
            interest_rate=self.interest_rate,
            overdraft_fee_schedule=OverdraftFeeSchedule(**schedule.model_dump()) if schedule else None,
            nsf_fee=self.nsf_fee,
            daily_overdraft_fee=self.daily_overdraft_fee,
            monthly_deposits=self.monthly_deposits,
            is_active=self.is_active,
        )


class ScenarioSchema(BaseModel):
    """Scenario to analyze; parameters depend on the scenario type"""

    id: str = Field(..., min_length=1)
    name: str
    type: str = Field(..., min_length=1, description="home_purchase, car_purchase, major_purchase, ...")
    parameters: Dict[str, Any] = Field(default_factory=dict)

    def to_domain(self) -> Scenario:
        return build_scenario(self.id, self.name, self.type, self.parameters)


class FinancialContextSchema(BaseModel):
    """Household cash-flow picture"""

    monthly_income: float = Field(0.0, ge=0)
    monthly_expenses: float = Field(0.0, ge=0)
    emergency_fund: float = Field(0.0, ge=0)
    payment_preferences: Dict[str, str] = Field(default_factory=dict)

    def to_domain(self) -> FinancialContext:
        return FinancialContext(**self.model_dump())


class ConsequenceRequest(BaseModel):
    """Request body for POST /v1/consequences"""

    scenario: ScenarioSchema
    financial_context: FinancialContextSchema = Field(default_factory=FinancialContextSchema)
    accounts: List[AccountSchema]


class UserConsequenceRequest(BaseModel):
    """Request body for POST /v1/consequences/by-user"""

    user_id: str = Field(..., min_length=1, description="User whose accounts are loaded from the account store")
    scenario: ScenarioSchema
    financial_context: FinancialContextSchema = Field(default_factory=FinancialContextSchema)


class ConsequenceResponse(BaseModel):
    """Successful consequence analysis"""

    success: bool = True
    result: ConsequenceReport
    metadata: AnalysisMetadata
