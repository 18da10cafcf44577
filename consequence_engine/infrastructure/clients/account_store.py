"""Account store HTTP client for fetching a user's account snapshot"""

import httpx
from typing import Any, Dict, List
from consequence_engine.domain.models import Account, OverdraftFeeSchedule
from consequence_engine.domain.exceptions import AccountStoreError
from consequence_engine.config import settings


def _optional_float(record: Dict[str, Any], key: str) -> float | None:
    value = record.get(key)
    return float(value) if value is not None else None


def _parse_account(record: Dict[str, Any]) -> Account:
    fees = record.get("overdraftFees")
    schedule = (
        OverdraftFeeSchedule(
            per_occurrence=float(fees.get("perOccurrence", 35)),
            max_per_day=int(fees.get("maxPerDay", 6)),
            max_per_month=int(fees.get("maxPerMonth", 30)),
        )
        if fees
        else None
    )
    return Account(
        id=str(record["id"]),
        name=record["name"],
        type=record["type"],
        current_balance=float(record.get("currentBalance") or 0),
        credit_limit=_optional_float(record, "creditLimit"),
        interest_rate=_optional_float(record, "interestRate"),
        overdraft_fee_schedule=schedule,
        nsf_fee=_optional_float(record, "nsfFee"),
        daily_overdraft_fee=_optional_float(record, "dailyOverdraftFee"),
        monthly_deposits=_optional_float(record, "monthlyDeposits"),
        is_active=bool(record.get("isActive", True)),
    )


class AccountStoreClient:
    """Client for the upstream account store"""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.account_store_base
        self.timeout = timeout or settings.http_timeout_seconds

    async def get_accounts(self, user_id: str) -> List[Account]:
        """
        Fetch the current account snapshot for a user.

        Raises:
            AccountStoreError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/accounts",
                    params={"user_id": user_id},
                )
                response.raise_for_status()
                data = response.json()

                return [_parse_account(record) for record in data.get("accounts", [])]

            except httpx.TimeoutException as e:
                raise AccountStoreError(f"Account store timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise AccountStoreError(f"Account store error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise AccountStoreError(f"Account store unreachable: {e}") from e
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                raise AccountStoreError(f"Invalid account data from store: {e}") from e
