"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from consequence_engine.domain.pipeline import FinancialConsequenceEngine
from consequence_engine.infrastructure.clients.account_store import AccountStoreClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_engine() -> FinancialConsequenceEngine:
    """Provide consequence engine instance"""
    return FinancialConsequenceEngine()


def get_account_store_client() -> AccountStoreClient:
    """Provide account store client instance"""
    return AccountStoreClient()
