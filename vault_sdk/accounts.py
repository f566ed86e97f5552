"""
PDA Vault SDK - Account Validation

Checks every account a caller presents against the identity and ownership
the program expects. The vault address is re-derived from the owner key on
every request; a caller-supplied bump is never trusted.

Check order (first failure wins):
  deposit:  signer -> system owned -> empty -> derived address
  withdraw: signer -> system owned -> derived address
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

from .config import DEFAULT_CONFIG, VaultConfig
from .errors import (
    AddressMismatch,
    AlreadyInitialized,
    InvalidOwnership,
    MalformedRequest,
    Unauthorized,
)
from .pda import derive_vault_address
from .vault_types import AccountInfo, short_key

log = logging.getLogger(__name__)

ACCOUNT_COUNT = 3


def unpack_accounts(accounts: Sequence[AccountInfo],
                    config: VaultConfig = DEFAULT_CONFIG
                    ) -> Tuple[AccountInfo, AccountInfo, AccountInfo]:
    """Split [owner, vault, system_program] and verify the system program key."""
    if len(accounts) != ACCOUNT_COUNT:
        raise MalformedRequest(
            f"expected {ACCOUNT_COUNT} accounts, got {len(accounts)}")

    owner, vault, system_program = accounts
    if system_program.key != config.system_program_id:
        raise MalformedRequest(
            f"account 2 is {short_key(system_program.key)}, not the system program")
    return owner, vault, system_program


def _check_signer_and_ownership(owner: AccountInfo, vault: AccountInfo,
                                config: VaultConfig):
    if not owner.is_signer:
        raise Unauthorized(f"owner {short_key(owner.key)} did not sign")

    if not vault.is_owned_by(config.system_program_id):
        raise InvalidOwnership(
            f"vault {short_key(vault.key)} owned by {short_key(vault.owner)}")


def _check_address(owner: AccountInfo, vault: AccountInfo,
                   config: VaultConfig) -> int:
    expected, bump = derive_vault_address(owner.key, config)
    if vault.key != expected:
        raise AddressMismatch(
            f"vault {short_key(vault.key)} != derived {short_key(expected)}")
    return bump


def validate_deposit_accounts(owner: AccountInfo, vault: AccountInfo,
                              config: VaultConfig = DEFAULT_CONFIG) -> None:
    _check_signer_and_ownership(owner, vault, config)

    if vault.lamports != 0:
        raise AlreadyInitialized(
            f"vault {short_key(vault.key)} holds {vault.lamports} lamports")

    _check_address(owner, vault, config)
    log.debug(f"Deposit accounts ok: owner={short_key(owner.key)}")


def validate_withdraw_accounts(owner: AccountInfo, vault: AccountInfo,
                               config: VaultConfig = DEFAULT_CONFIG) -> int:
    """Validate withdraw accounts and return the bump needed to sign for the vault."""
    _check_signer_and_ownership(owner, vault, config)
    bump = _check_address(owner, vault, config)
    log.debug(f"Withdraw accounts ok: owner={short_key(owner.key)} bump={bump}")
    return bump


@dataclass(frozen=True)
class DepositAccounts:
    owner: AccountInfo
    vault: AccountInfo
    system_program: AccountInfo

    @classmethod
    def from_accounts(cls, accounts: Sequence[AccountInfo],
                      config: VaultConfig = DEFAULT_CONFIG) -> "DepositAccounts":
        owner, vault, system_program = unpack_accounts(accounts, config)
        validate_deposit_accounts(owner, vault, config)
        return cls(owner, vault, system_program)


@dataclass(frozen=True)
class WithdrawAccounts:
    owner: AccountInfo
    vault: AccountInfo
    system_program: AccountInfo
    bump: int

    @classmethod
    def from_accounts(cls, accounts: Sequence[AccountInfo],
                      config: VaultConfig = DEFAULT_CONFIG) -> "WithdrawAccounts":
        owner, vault, system_program = unpack_accounts(accounts, config)
        bump = validate_withdraw_accounts(owner, vault, config)
        return cls(owner, vault, system_program, bump)
