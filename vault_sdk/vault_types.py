"""
PDA Vault SDK - Data Types

Account views, derivation results and the seed-based signer token.
"""

from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import NamedTuple, Tuple

from solders.pubkey import Pubkey


class Opcode(IntEnum):
    """Leading instruction byte."""
    DEPOSIT = 0
    WITHDRAW = 1


class VaultState(Enum):
    """
    Observable vault state.

    A fully withdrawn vault is system-owned with zero balance, exactly like a
    vault that never received funds, so both read as UNINITIALIZED.
    """
    UNINITIALIZED = "uninitialized"
    FUNDED = "funded"


class DerivationResult(NamedTuple):
    """Program address plus the bump byte that pushed it off the curve."""
    address: Pubkey
    bump: int


@dataclass(frozen=True)
class AccountMeta:
    """How an instruction wants to access one account."""
    pubkey: Pubkey
    is_signer: bool = False
    is_writable: bool = False

    def to_dict(self) -> dict:
        return {
            "pubkey": str(self.pubkey),
            "is_signer": self.is_signer,
            "is_writable": self.is_writable,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AccountMeta":
        return cls(
            pubkey=Pubkey.from_string(data["pubkey"]),
            is_signer=bool(data.get("is_signer", False)),
            is_writable=bool(data.get("is_writable", False)),
        )


@dataclass(frozen=True)
class AccountInfo:
    """
    Read-only view of an account as the program sees it during one request.

    Fields are immutable values; `owner` is a Pubkey copy, never a reference
    into ledger storage. Balances change only through the transfer primitive,
    which hands back fresh views.
    """
    key: Pubkey
    owner: Pubkey
    lamports: int = 0
    is_signer: bool = False
    is_writable: bool = False

    def is_owned_by(self, program_id: Pubkey) -> bool:
        return self.owner == program_id

    def with_lamports(self, lamports: int) -> "AccountInfo":
        return replace(self, lamports=lamports)


@dataclass(frozen=True)
class SignerSeeds:
    """
    Capability token standing in for a signature of a program address.

    Ordered seed sequence, bump byte last. Redeemable only by a primitive
    that re-derives the address from these seeds and the invoking program id.
    """
    seeds: Tuple[bytes, ...]

    def __post_init__(self):
        object.__setattr__(self, "seeds", tuple(bytes(s) for s in self.seeds))

    @property
    def bump(self) -> int:
        return self.seeds[-1][0]

    def __iter__(self):
        return iter(self.seeds)

    def __len__(self) -> int:
        return len(self.seeds)


def short_key(key, visible_prefix: int = 6, visible_suffix: int = 4) -> str:
    """Abbreviate a key for log lines."""
    text = str(key)
    if len(text) <= visible_prefix + visible_suffix:
        return text
    return f"{text[:visible_prefix]}...{text[-visible_suffix:]}"
