"""
PDA Vault SDK - RPC Client

HTTP client for a vault node (vault_sdk.server).
"""

import requests
from typing import Any, List, Optional

from solders.pubkey import Pubkey

from .config import DEFAULT_RPC_URL
from .errors import ERRORS_BY_CODE, error_from_dict
from .ledger import AccountRecord
from .transaction import Transaction


class RPCError(Exception):
    """RPC call failed."""
    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(f"RPC Error {code}: {message}")


class RPCClient:
    """
    HTTP client for a vault node.

    Usage:
        rpc = RPCClient("http://127.0.0.1:8899")
        rpc.airdrop(owner.pubkey(), 5_000_000)
        balance = rpc.get_balance(owner.pubkey())
    """

    def __init__(self, url: str = DEFAULT_RPC_URL, timeout: int = 30,
                 session: Optional[requests.Session] = None):
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _call(self, method: str, path: str, payload: Optional[dict] = None,
              params: Optional[dict] = None) -> Any:
        """Make HTTP call; vault rejections come back as VaultError subclasses."""
        try:
            response = self.session.request(
                method,
                f"{self.url}{path}",
                json=payload,
                params=params,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise RPCError(-1, f"Connection failed: {e}")

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            if isinstance(body, dict) and body.get("code") in ERRORS_BY_CODE:
                raise error_from_dict(body)
            detail = body.get("detail") if isinstance(body, dict) else response.text
            raise RPCError(response.status_code, str(detail))

        return body

    # ═══════════════════════════════════════════════════════════════════════
    # NODE METHODS
    # ═══════════════════════════════════════════════════════════════════════

    def get_status(self) -> dict:
        return self._call("GET", "/api/status")

    def get_account(self, key: Pubkey) -> AccountRecord:
        data = self._call("GET", f"/api/accounts/{key}")
        return AccountRecord(lamports=int(data["lamports"]),
                             owner=Pubkey.from_string(data["owner"]))

    def get_balance(self, key: Pubkey) -> int:
        return self.get_account(key).lamports

    def get_vault(self, owner: Pubkey) -> dict:
        return self._call("GET", f"/api/vault/{owner}")

    def airdrop(self, key: Pubkey, lamports: int) -> int:
        """Fund `key` on a local node. Returns the new balance."""
        data = self._call("POST", "/api/airdrop",
                          {"pubkey": str(key), "lamports": lamports})
        return int(data["lamports"])

    def send_transaction(self, tx: Transaction) -> str:
        return self._call("POST", "/api/transactions", tx.to_dict())["signature"]

    # Ledger-compatible alias so VaultClient can drive either backend
    execute = send_transaction

    def recent_transactions(self, limit: int = 50) -> List[dict]:
        return self._call("GET", "/api/transactions", params={"limit": limit})["transactions"]

    def test_connection(self) -> bool:
        """Test if the node answers."""
        try:
            self.get_status()
            return True
        except RPCError:
            return False
