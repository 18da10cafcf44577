"""Mock account store serving persona snapshots from mock/account_stub"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException

STUB_DIR = Path(os.environ.get("ACCOUNT_STUB_DIR", Path(__file__).resolve().parents[1] / "account_stub"))


def load_snapshots(stub_dir: Path) -> Dict[str, List[Dict[str, Any]]]:
    """Index every accounts_*.json stub by the user_id it declares"""
    snapshots = {}
    for path in sorted(stub_dir.glob("accounts_*.json")):
        payload = json.loads(path.read_text())
        snapshots[payload["user_id"]] = payload["accounts"]
    return snapshots


SNAPSHOTS = load_snapshots(STUB_DIR)

app = FastAPI(title="Mock Account Store", version="1.0.0")


@app.get("/health")
def health():
    return {"status": "ok", "users": len(SNAPSHOTS)}


@app.get("/users")
def list_users():
    return {"users": sorted(SNAPSHOTS)}


@app.get("/accounts")
def get_accounts(user_id: str, include_inactive: bool = True):
    if user_id not in SNAPSHOTS:
        raise HTTPException(status_code=404, detail=f"No account snapshot for {user_id}")

    accounts = SNAPSHOTS[user_id]
    if not include_inactive:
        accounts = [account for account in accounts if account.get("isActive", True)]

    return {"user_id": user_id, "accounts": accounts}
