"""
PDA Vault SDK - In-Memory Ledger

Host side of the vault program: account store, signature checks, request
locking and the system transfer primitive. Used by tests, the CLI and the
local HTTP node.

Each transaction runs under one lock against copies of the accounts it
names; the copies are committed only if the program returns without error,
so a rejected request leaves every balance untouched.

Usage:
    ledger = Ledger()
    ledger.airdrop(owner.pubkey(), 5_000_000)
    ledger.execute(Transaction(build_deposit_instruction(owner.pubkey(), 1000)).sign(owner))
"""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Set

from solders.pubkey import Pubkey

from .config import DEFAULT_CONFIG, VaultConfig
from .errors import (
    AccountNotWritable,
    InsufficientFunds,
    InvalidSeeds,
    InvalidSourceOwner,
    MissingRequiredSignature,
    ProgramNotFound,
    SignatureVerificationFailed,
    TransferError,
    VaultError,
)
from .pda import create_program_address
from .processor import process_instruction
from .system import SystemProgram
from .transaction import Transaction
from .vault_types import AccountInfo, SignerSeeds, short_key

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountRecord:
    """Stored account state. Build empty records via Ledger.empty_account()."""
    lamports: int
    owner: Pubkey

    def to_dict(self) -> dict:
        return {"lamports": self.lamports, "owner": str(self.owner)}


class _Invocation(SystemProgram):
    """System primitive bound to one running request and its working set."""

    def __init__(self, ledger: "Ledger", program_id: Pubkey,
                 working: Dict[Pubkey, AccountRecord]):
        self.ledger = ledger
        self.program_id = program_id
        self.working = working

    def transfer(self, source: AccountInfo, destination: AccountInfo,
                 lamports: int) -> None:
        if not source.is_signer:
            raise MissingRequiredSignature(f"{short_key(source.key)} did not sign")
        self._move(source, destination, lamports)

    def transfer_signed(self, source: AccountInfo, destination: AccountInfo,
                        lamports: int, signer_seeds: SignerSeeds) -> None:
        if not source.is_signer:
            try:
                derived = create_program_address(signer_seeds.seeds, self.program_id)
            except InvalidSeeds as e:
                raise MissingRequiredSignature(f"unusable signer seeds: {e.message}")
            if derived != source.key:
                raise MissingRequiredSignature(
                    f"seeds derive {short_key(derived)}, not {short_key(source.key)}")
        self._move(source, destination, lamports)

    def _move(self, source: AccountInfo, destination: AccountInfo, lamports: int):
        if lamports < 0:
            raise TransferError(f"negative amount {lamports}")
        if not source.is_writable:
            raise AccountNotWritable(f"{short_key(source.key)} is read-only")
        if not destination.is_writable:
            raise AccountNotWritable(f"{short_key(destination.key)} is read-only")

        src = self.working.get(source.key) or self.ledger.empty_account()
        if src.owner != self.ledger.config.system_program_id:
            raise InvalidSourceOwner(
                f"{short_key(source.key)} owned by {short_key(src.owner)}")
        if src.lamports < lamports:
            raise InsufficientFunds(
                f"{short_key(source.key)} has {src.lamports}, needs {lamports}")

        self.working[source.key] = replace(src, lamports=src.lamports - lamports)
        dst = self.working.get(destination.key) or self.ledger.empty_account()
        self.working[destination.key] = replace(dst, lamports=dst.lamports + lamports)


class Ledger:
    """Single-node account store hosting the vault program."""

    MAX_LOG = 1000

    def __init__(self, config: VaultConfig = DEFAULT_CONFIG):
        self.config = config
        self._accounts: Dict[Pubkey, AccountRecord] = {}
        self._lock = threading.Lock()
        self._log: deque = deque(maxlen=self.MAX_LOG)
        self.tx_count = 0

    # ═══════════════════════════════════════════════════════════════════════
    # ACCOUNTS
    # ═══════════════════════════════════════════════════════════════════════

    def empty_account(self) -> AccountRecord:
        """Unknown keys read as empty accounts owned by the system program."""
        return AccountRecord(lamports=0, owner=self.config.system_program_id)

    def get_account(self, key: Pubkey) -> AccountRecord:
        with self._lock:
            return self._accounts.get(key) or self.empty_account()

    def get_balance(self, key: Pubkey) -> int:
        return self.get_account(key).lamports

    def set_account(self, key: Pubkey, record: AccountRecord):
        """Overwrite an account (genesis/test setup)."""
        with self._lock:
            self._accounts[key] = record

    def airdrop(self, key: Pubkey, lamports: int) -> int:
        """Mint lamports into `key`. Returns the new balance."""
        if lamports <= 0:
            raise ValueError("Airdrop amount must be positive")
        with self._lock:
            current = self._accounts.get(key) or self.empty_account()
            updated = replace(current, lamports=current.lamports + lamports)
            self._accounts[key] = updated
        log.info(f"Airdrop: {lamports} lamports -> {short_key(key)}")
        return updated.lamports

    # ═══════════════════════════════════════════════════════════════════════
    # EXECUTION
    # ═══════════════════════════════════════════════════════════════════════

    def _verify_signatures(self, tx: Transaction) -> Set[Pubkey]:
        message = tx.message_bytes()
        signers = set()
        for key_str in tx.signatures:
            try:
                key = Pubkey.from_string(key_str)
                signature = tx.signature_for(key)
            except ValueError as e:
                raise SignatureVerificationFailed(f"unparseable signature entry: {e}")
            if signature is None:
                raise SignatureVerificationFailed(f"empty signature for {short_key(key)}")
            if not signature.verify(key, message):
                raise SignatureVerificationFailed(f"bad signature for {short_key(key)}")
            signers.add(key)
        return signers

    def execute(self, tx: Transaction) -> str:
        """
        Run one transaction atomically.

        Returns:
            Transaction signature

        Raises:
            VaultError: program, transfer or signature failure; no state changed
        """
        ix = tx.instruction
        with self._lock:
            self.tx_count += 1
            try:
                signers = self._verify_signatures(tx)
                if ix.program_id != self.config.program_id:
                    raise ProgramNotFound(f"no program at {short_key(ix.program_id)}")

                working = {}
                infos: List[AccountInfo] = []
                for meta in ix.accounts:
                    record = self._accounts.get(meta.pubkey) or self.empty_account()
                    working[meta.pubkey] = record
                    infos.append(AccountInfo(
                        key=meta.pubkey,
                        owner=record.owner,
                        lamports=record.lamports,
                        is_signer=meta.is_signer and meta.pubkey in signers,
                        is_writable=meta.is_writable,
                    ))

                invocation = _Invocation(self, ix.program_id, working)
                opcode = process_instruction(ix.program_id, infos, ix.data,
                                             invocation, self.config)
            except VaultError as e:
                log.warning(f"Transaction rejected: {e.name}: {e.message}")
                self._record(tx, None, e)
                raise

            self._accounts.update(invocation.working)
            self._record(tx, opcode.name.lower(), None)
        return tx.signature

    def _record(self, tx: Transaction, operation: Optional[str],
                error: Optional[VaultError]):
        self._log.append({
            "signature": tx.signature,
            "operation": operation,
            "status": "failed" if error else "ok",
            "error": error.to_dict() if error else None,
            "timestamp": int(time.time()),
        })

    def recent_transactions(self, limit: int = 50) -> List[dict]:
        """Most recent first."""
        with self._lock:
            entries = list(self._log)
        return list(reversed(entries))[:max(limit, 0)]
