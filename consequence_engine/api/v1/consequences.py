"""POST /v1/consequences - financial consequence analysis endpoints"""

import asyncio
import time
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from starlette.responses import Response

from consequence_engine.api.v1.schemas import ConsequenceRequest, ConsequenceResponse, UserConsequenceRequest
from consequence_engine.api.dependencies import get_account_store_client, get_engine, get_request_id
from consequence_engine.config import settings
from consequence_engine.domain.exceptions import AccountStoreError, InvalidScenarioError
from consequence_engine.domain.models import Account, FinancialContext
from consequence_engine.domain.pipeline import FinancialConsequenceEngine
from consequence_engine.domain.scenarios import Scenario
from consequence_engine.infrastructure.clients.account_store import AccountStoreClient
from consequence_engine.infrastructure.observability.metrics import (
    account_store_failures_counter,
    record_failure,
    record_success,
)
from consequence_engine.infrastructure.observability.logging import log_analysis

router = APIRouter()


def _parse_scenario(request_body: ConsequenceRequest | UserConsequenceRequest, request_id: str) -> Scenario:
    try:
        return request_body.scenario.to_domain()
    except InvalidScenarioError as e:
        logging.warning(f"Invalid scenario: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))


async def _analyze(
    scenario: Scenario,
    financial_context: FinancialContext,
    accounts: List[Account],
    engine: FinancialConsequenceEngine,
    request_id: str,
) -> Response:
    """
    Run the pipeline under the caller-side deadline and map the outcome to HTTP.

    Flow:
    1. Run the six-stage analysis (worker thread, bounded by analysis_timeout_seconds)
    2. Record metrics and the structured summary log
    3. Return the report, or 422 naming the failed phase
    """
    start_time = time.time()

    try:
        outcome = await asyncio.wait_for(
            engine.execute_consequence_analysis(scenario, financial_context, accounts),
            timeout=settings.analysis_timeout_seconds,
        )
    except asyncio.TimeoutError:
        duration_ms = (time.time() - start_time) * 1000
        record_failure(duration_ms, [])
        log_analysis(request_id, scenario.id, scenario.type, False, duration_ms)
        logging.error(
            f"Consequence analysis exceeded {settings.analysis_timeout_seconds}s",
            extra={"request_id": request_id},
        )
        raise HTTPException(status_code=504, detail="Consequence analysis timed out")

    duration_ms = (time.time() - start_time) * 1000

    if not outcome.success:
        record_failure(outcome.execution_time, [error.phase for error in outcome.errors])
        log_analysis(request_id, scenario.id, scenario.type, False, duration_ms)
        logging.warning(f"Consequence analysis failed: {outcome.error}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=outcome.error)

    report = outcome.result
    record_success(outcome.metadata.execution_time, report.execution_feasible, report.risk_level.value)
    log_analysis(
        request_id,
        scenario.id,
        scenario.type,
        True,
        duration_ms,
        feasible=report.execution_feasible,
        risk_level=report.risk_level.value,
        total_cost=report.total_cost,
    )

    # Rendered through pydantic's JSON serializer so an unbounded payoff_time becomes null
    response = ConsequenceResponse(success=True, result=report, metadata=outcome.metadata)
    return Response(content=response.model_dump_json(), media_type="application/json")


@router.post("/consequences", response_model=ConsequenceResponse)
async def create_consequence_analysis(
    request_body: ConsequenceRequest,
    request: Request,
    engine: FinancialConsequenceEngine = Depends(get_engine),
):
    """Analyze a scenario against an account snapshot supplied in the request."""
    request_id = get_request_id(request)
    scenario = _parse_scenario(request_body, request_id)
    accounts = [account.to_domain() for account in request_body.accounts]

    return await _analyze(scenario, request_body.financial_context.to_domain(), accounts, engine, request_id)


@router.post("/consequences/by-user", response_model=ConsequenceResponse)
async def create_user_consequence_analysis(
    request_body: UserConsequenceRequest,
    request: Request,
    engine: FinancialConsequenceEngine = Depends(get_engine),
    account_store: AccountStoreClient = Depends(get_account_store_client),
):
    """
    Analyze a scenario against the user's current accounts.

    Flow:
    1. Fetch the account snapshot from the account store
    2. Run the consequence analysis
    """
    request_id = get_request_id(request)
    scenario = _parse_scenario(request_body, request_id)

    try:
        accounts = await account_store.get_accounts(request_body.user_id)
    except AccountStoreError as e:
        account_store_failures_counter.inc()
        logging.error(f"Account store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Account store unavailable")

    return await _analyze(scenario, request_body.financial_context.to_domain(), accounts, engine, request_id)
