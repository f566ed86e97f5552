"""
PDA Vault SDK

Per-owner escrow vault at a program derived address (PDA).

Architecture:
  - The vault address is derived from ("vault", owner) and the program id;
    no private key exists for it
  - Deposit: owner signs, lamports move owner -> vault (vault must be empty)
  - Withdraw: owner signs, the program signs for the vault with its
    derivation seeds, and the whole balance moves vault -> owner
  - The ledger (host) verifies signatures, locks accounts per request and
    owns the system transfer primitive

Usage:
    from vault_sdk import Ledger, VaultClient
    from solders.keypair import Keypair

    ledger = Ledger()
    owner = Keypair()
    ledger.airdrop(owner.pubkey(), 10_000)

    vault = VaultClient(ledger)
    vault.deposit(owner, 4_000)
    vault.withdraw(owner)
"""

from .config import VaultConfig, DEFAULT_CONFIG, PROGRAM_ID, SYSTEM_PROGRAM_ID, VAULT_SEED
from .errors import (
    VaultError,
    MalformedRequest,
    Unauthorized,
    InvalidOwnership,
    AlreadyInitialized,
    AddressMismatch,
    InvalidAmount,
    UnknownOperation,
    InvalidSeeds,
    TransferError,
)
from .vault_types import AccountInfo, AccountMeta, DerivationResult, SignerSeeds, Opcode, VaultState
from .pda import create_program_address, find_program_address, derive_vault_address, vault_signer_seeds
from .accounts import validate_deposit_accounts, validate_withdraw_accounts
from .processor import process_instruction
from .ledger import Ledger, AccountRecord
from .transaction import Instruction, Transaction, build_deposit_instruction, build_withdraw_instruction
from .vault_wrapper import VaultClient
from .rpc_client import RPCClient, RPCError

__version__ = "0.1.0"
__all__ = [
    # Config
    "VaultConfig", "DEFAULT_CONFIG", "PROGRAM_ID", "SYSTEM_PROGRAM_ID", "VAULT_SEED",
    # Errors
    "VaultError", "MalformedRequest", "Unauthorized", "InvalidOwnership",
    "AlreadyInitialized", "AddressMismatch", "InvalidAmount", "UnknownOperation",
    "InvalidSeeds", "TransferError",
    # Types
    "AccountInfo", "AccountMeta", "DerivationResult", "SignerSeeds", "Opcode", "VaultState",
    # Core
    "create_program_address", "find_program_address", "derive_vault_address",
    "vault_signer_seeds", "validate_deposit_accounts", "validate_withdraw_accounts",
    "process_instruction",
    # Host & client
    "Ledger", "AccountRecord", "Instruction", "Transaction",
    "build_deposit_instruction", "build_withdraw_instruction",
    "VaultClient", "RPCClient", "RPCError",
]
