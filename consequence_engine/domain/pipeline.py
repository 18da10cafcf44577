"""
Financial consequence pipeline - runs the six analysis stages in order.

Stages (each reads only what earlier stages produced):
1. payment_capacity_analysis - required amount, primary account, fallback sequence
2. overdraft_modeling        - overdraft/NSF fees on overdrawn checking steps
3. credit_impact_analysis    - utilization and interest on charged cards
4. cascade_analysis          - second-order risks and total additional cost
5. intelligent_solutions     - optimal payment method and strategies
6. consequence_report        - feasibility, risk level, recommendation
"""

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from consequence_engine.domain.cascade import analyze_cascade_effects
from consequence_engine.domain.credit import calculate_credit_impacts
from consequence_engine.domain.models import (
    Account,
    AnalysisFailure,
    AnalysisMetadata,
    AnalysisSuccess,
    ConsequenceModel,
    ConsequenceReport,
    FinancialContext,
    IntelligentSolutions,
    PaymentAnalysis,
    PhaseError,
)
from consequence_engine.domain.overdraft import model_overdraft_consequences
from consequence_engine.domain.report import synthesize_report
from consequence_engine.domain.scenarios import Scenario
from consequence_engine.domain.selection import analyze_payment_capacity
from consequence_engine.domain.solutions import generate_solutions

AnalysisResult = Union[AnalysisSuccess, AnalysisFailure]


@dataclass(frozen=True)
class AnalysisState:
    """Inputs plus every section produced so far; replaced, never mutated, by each stage"""

    scenario: Scenario
    financial_context: FinancialContext
    accounts: Tuple[Account, ...]
    payment_analysis: Optional[PaymentAnalysis] = None
    consequences: Optional[ConsequenceModel] = None
    solutions: Optional[IntelligentSolutions] = None
    report: Optional[ConsequenceReport] = None


def _payment_capacity(state: AnalysisState) -> AnalysisState:
    return replace(state, payment_analysis=analyze_payment_capacity(state.scenario, state.accounts))


def _overdraft(state: AnalysisState) -> AnalysisState:
    return replace(state, consequences=model_overdraft_consequences(state.payment_analysis))


def _credit(state: AnalysisState) -> AnalysisState:
    return replace(state, consequences=calculate_credit_impacts(state.payment_analysis, state.consequences))


def _cascade(state: AnalysisState) -> AnalysisState:
    return replace(
        state,
        consequences=analyze_cascade_effects(state.payment_analysis, state.consequences, state.financial_context),
    )


def _solutions(state: AnalysisState) -> AnalysisState:
    return replace(
        state,
        solutions=generate_solutions(state.scenario, state.accounts, state.payment_analysis, state.consequences),
    )


def _report(state: AnalysisState) -> AnalysisState:
    return replace(state, report=synthesize_report(state.payment_analysis, state.consequences, state.solutions))


class Stage:
    """Named pipeline step with a log summary of what it produced"""

    def __init__(
        self,
        phase: str,
        run: Callable[[AnalysisState], AnalysisState],
        summarize: Callable[[AnalysisState], Dict[str, Any]],
    ):
        self.phase = phase
        self.run = run
        self.summarize = summarize


STAGES: Tuple[Stage, ...] = (
    Stage(
        "payment_capacity_analysis",
        _payment_capacity,
        lambda s: {
            "required_amount": s.payment_analysis.required_amount,
            "available_funds": s.payment_analysis.available_funds,
            "shortfall": s.payment_analysis.shortfall,
            "sequence_steps": len(s.payment_analysis.fallback_sequence),
        },
    ),
    Stage(
        "overdraft_modeling",
        _overdraft,
        lambda s: {
            "overdrafts": len(s.consequences.overdraft_fees),
            "overdraft_costs": s.consequences.total_overdraft_costs,
        },
    ),
    Stage(
        "credit_impact_analysis",
        _credit,
        lambda s: {
            "credit_accounts": len(s.consequences.credit_utilization),
            "credit_costs": s.consequences.total_credit_costs,
        },
    ),
    Stage(
        "cascade_analysis",
        _cascade,
        lambda s: {
            "cascade_effects": len(s.consequences.cascade_effects),
            "additional_costs": s.consequences.total_additional_costs,
        },
    ),
    Stage(
        "intelligent_solutions",
        _solutions,
        lambda s: {
            "alternatives": len(s.solutions.alternative_approaches),
            "mitigations": len(s.solutions.risk_mitigation),
        },
    ),
    Stage(
        "consequence_report",
        _report,
        lambda s: {
            "feasible": s.report.execution_feasible,
            "total_cost": s.report.total_cost,
            "risk_level": s.report.risk_level,
        },
    ),
)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def run_consequence_analysis(
    scenario: Scenario,
    financial_context: FinancialContext,
    accounts: Sequence[Account],
) -> AnalysisResult:
    """
    Main entry point: analyze what executing a scenario right now would really cost.

    Each stage is guarded; a failing stage records a PhaseError and the stages after it
    are skipped. A report is only returned when all six stages completed, otherwise the
    result is an AnalysisFailure naming the failed phase. Inputs are never modified.
    """
    start = time.perf_counter()

    try:
        state = AnalysisState(scenario=scenario, financial_context=financial_context, accounts=tuple(accounts))
        phases: List[str] = []
        errors: List[PhaseError] = []

        for stage in STAGES:
            try:
                state = stage.run(state)
            except Exception as e:
                logging.error(
                    f"Phase {stage.phase} failed: {e}",
                    extra={"phase": stage.phase, "scenario_id": scenario.id},
                )
                errors.append(PhaseError(phase=stage.phase, error=str(e), timestamp=time.time()))
                break

            phases.append(stage.phase)
            logging.info(
                "Phase completed",
                extra={"phase": stage.phase, "scenario_id": scenario.id, **stage.summarize(state)},
            )

        execution_time = _elapsed_ms(start)

        if errors:
            first = errors[0]
            return AnalysisFailure(
                error=f"{first.phase}: {first.error}",
                execution_time=execution_time,
                errors=tuple(errors),
            )

        return AnalysisSuccess(
            result=state.report,
            metadata=AnalysisMetadata(execution_time=execution_time, phases=tuple(phases)),
        )

    except Exception as e:
        logging.error(f"Consequence analysis failed: {e}")
        return AnalysisFailure(error=str(e), execution_time=_elapsed_ms(start))


class FinancialConsequenceEngine:
    """Async facade over the pipeline; stages are pure so any worker thread can run them"""

    async def execute_consequence_analysis(
        self,
        scenario: Scenario,
        financial_context: FinancialContext,
        accounts: Sequence[Account],
    ) -> AnalysisResult:
        return await asyncio.to_thread(run_consequence_analysis, scenario, financial_context, accounts)
