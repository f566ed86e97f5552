"""
PDA Vault SDK - Instruction Handlers

Deposit:  owner signs, lamports move owner -> vault.
Withdraw: the vault "signs" with its derivation seeds, and its whole
          balance moves vault -> owner.

Each handler validates accounts and payload when built; process() performs
the single transfer, always as the last step.
"""

import logging
import struct
from dataclasses import dataclass
from typing import Sequence

from .accounts import DepositAccounts, WithdrawAccounts
from .config import DEFAULT_CONFIG, VaultConfig
from .errors import InvalidAmount, MalformedRequest
from .pda import vault_signer_seeds
from .system import SystemProgram
from .vault_types import AccountInfo, Opcode, short_key

log = logging.getLogger(__name__)

AMOUNT_FORMAT = "<Q"
AMOUNT_SIZE = struct.calcsize(AMOUNT_FORMAT)


@dataclass(frozen=True)
class DepositData:
    amount: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "DepositData":
        """Parse an 8-byte little-endian u64; zero is rejected."""
        if len(data) != AMOUNT_SIZE:
            raise MalformedRequest(
                f"deposit payload is {len(data)} bytes, expected {AMOUNT_SIZE}")

        (amount,) = struct.unpack(AMOUNT_FORMAT, data)
        if amount == 0:
            raise InvalidAmount("deposit amount must be greater than 0")
        return cls(amount)

    def to_bytes(self) -> bytes:
        return struct.pack(AMOUNT_FORMAT, self.amount)


@dataclass(frozen=True)
class Deposit:
    DISCRIMINATOR = Opcode.DEPOSIT

    accounts: DepositAccounts
    data: DepositData

    @classmethod
    def parse(cls, data: bytes, accounts: Sequence[AccountInfo],
              config: VaultConfig = DEFAULT_CONFIG) -> "Deposit":
        return cls(
            accounts=DepositAccounts.from_accounts(accounts, config),
            data=DepositData.from_bytes(data),
        )

    def process(self, system: SystemProgram) -> None:
        owner, vault = self.accounts.owner, self.accounts.vault
        system.transfer(owner, vault, self.data.amount)
        log.info(f"Deposit: {self.data.amount} lamports "
                 f"{short_key(owner.key)} -> vault {short_key(vault.key)}")


@dataclass(frozen=True)
class Withdraw:
    DISCRIMINATOR = Opcode.WITHDRAW

    accounts: WithdrawAccounts
    config: VaultConfig = DEFAULT_CONFIG

    @classmethod
    def parse(cls, accounts: Sequence[AccountInfo],
              config: VaultConfig = DEFAULT_CONFIG) -> "Withdraw":
        return cls(WithdrawAccounts.from_accounts(accounts, config), config)

    def process(self, system: SystemProgram) -> None:
        owner, vault = self.accounts.owner, self.accounts.vault
        signer = vault_signer_seeds(owner.key, self.accounts.bump, self.config)
        amount = vault.lamports

        system.transfer_signed(vault, owner, amount, signer)
        log.info(f"Withdraw: {amount} lamports "
                 f"vault {short_key(vault.key)} -> {short_key(owner.key)}")
