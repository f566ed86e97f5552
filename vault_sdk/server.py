"""
PDA Vault Node - REST API over an in-memory ledger

Endpoints:
  GET  /api/status              - Program identity and counters
  GET  /api/vault/<owner>       - Derived vault address, bump, balance
  GET  /api/accounts/<key>      - Account lamports and owner
  POST /api/airdrop             - Fund an account (local node only)
  POST /api/transactions        - Submit a signed transaction
  GET  /api/transactions        - Recent transactions

Run:
  python -m vault_sdk serve --port 8899
"""

import logging
import time
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from solders.pubkey import Pubkey

from .errors import VaultError
from .ledger import Ledger
from .transaction import Transaction
from .vault_types import short_key
from .vault_wrapper import VaultClient

log = logging.getLogger(__name__)


class AirdropRequest(BaseModel):
    pubkey: str
    lamports: int


def _parse_key(text: str) -> Pubkey:
    try:
        return Pubkey.from_string(text)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid pubkey: {text}")


def create_app(ledger: Optional[Ledger] = None) -> FastAPI:
    ledger = ledger or Ledger()
    vaults = VaultClient(ledger, ledger.config)
    started = time.time()

    app = FastAPI(title="PDA Vault Node", version="0.1.0")
    app.state.ledger = ledger

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(VaultError)
    async def vault_error_handler(request: Request, exc: VaultError):
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.get("/api/status")
    def get_status():
        return {
            **ledger.config.to_dict(),
            "tx_count": ledger.tx_count,
            "uptime": int(time.time() - started),
        }

    @app.get("/api/vault/{owner}")
    def get_vault(owner: str):
        return vaults.vault_info(_parse_key(owner))

    @app.get("/api/accounts/{key}")
    def get_account(key: str):
        pubkey = _parse_key(key)
        return {"pubkey": str(pubkey), **ledger.get_account(pubkey).to_dict()}

    @app.post("/api/airdrop")
    def airdrop(req: AirdropRequest):
        pubkey = _parse_key(req.pubkey)
        try:
            lamports = ledger.airdrop(pubkey, req.lamports)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"pubkey": str(pubkey), "lamports": lamports}

    @app.post("/api/transactions")
    def send_transaction(body: Dict[str, Any] = Body(...)):
        try:
            tx = Transaction.from_dict(body)
        except (KeyError, TypeError, ValueError) as e:
            raise HTTPException(status_code=422, detail=f"Malformed transaction: {e}")

        signature = ledger.execute(tx)
        log.info(f"Transaction ok: {short_key(signature)}")
        return {"signature": signature, "status": "ok"}

    @app.get("/api/transactions")
    def list_transactions(limit: int = 50):
        entries = ledger.recent_transactions(limit)
        return {"transactions": entries, "count": len(entries)}

    return app


app = create_app()
