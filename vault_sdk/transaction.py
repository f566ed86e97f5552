"""
PDA Vault SDK - Instructions & Transactions

Client-side builders. An instruction names the program, the ordered
account metas and the raw data (opcode byte + payload). A transaction
wraps one instruction with ed25519 signatures over its message bytes.

Usage:
    ix = build_deposit_instruction(owner.pubkey(), 1_000_000)
    tx = Transaction(ix).sign(owner)
    ledger.execute(tx)
"""

import json
import struct
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from .config import DEFAULT_CONFIG, VaultConfig
from .errors import MalformedRequest
from .instructions import DepositData
from .pda import derive_vault_address
from .vault_types import AccountMeta, Opcode


@dataclass(frozen=True)
class Instruction:
    program_id: Pubkey
    accounts: List[AccountMeta]
    data: bytes

    def to_dict(self) -> dict:
        return {
            "program_id": str(self.program_id),
            "accounts": [meta.to_dict() for meta in self.accounts],
            "data": self.data.hex(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Instruction":
        return cls(
            program_id=Pubkey.from_string(data["program_id"]),
            accounts=[AccountMeta.from_dict(m) for m in data.get("accounts", [])],
            data=bytes.fromhex(data.get("data", "")),
        )


def _vault_metas(owner: Pubkey, config: VaultConfig) -> List[AccountMeta]:
    vault, _ = derive_vault_address(owner, config)
    return [
        AccountMeta(owner, is_signer=True, is_writable=True),
        AccountMeta(vault, is_signer=False, is_writable=True),
        AccountMeta(config.system_program_id),
    ]


def build_deposit_instruction(owner: Pubkey, amount: int,
                              config: VaultConfig = DEFAULT_CONFIG) -> Instruction:
    if not 0 <= amount < 2 ** 64:
        raise ValueError(f"Amount must fit in a u64, got {amount}")
    data = bytes([Opcode.DEPOSIT]) + DepositData(amount).to_bytes()
    return Instruction(config.program_id, _vault_metas(owner, config), data)


def build_withdraw_instruction(owner: Pubkey,
                               config: VaultConfig = DEFAULT_CONFIG) -> Instruction:
    return Instruction(config.program_id, _vault_metas(owner, config),
                       bytes([Opcode.WITHDRAW]))


@dataclass
class Transaction:
    """One instruction plus signatures keyed by base58 signer pubkey."""
    instruction: Instruction
    signatures: Dict[str, str] = field(default_factory=dict)

    def message_bytes(self) -> bytes:
        """
        Canonical bytes covered by every signature.

        program_id(32) | u8 account count | (key(32) | u8 flags)* |
        u32 LE data length | data
        """
        ix = self.instruction
        if len(ix.accounts) > 255:
            raise MalformedRequest(f"{len(ix.accounts)} accounts in one instruction")

        parts = [bytes(ix.program_id), bytes([len(ix.accounts)])]
        for meta in ix.accounts:
            flags = (1 if meta.is_signer else 0) | (2 if meta.is_writable else 0)
            parts.append(bytes(meta.pubkey) + bytes([flags]))
        parts.append(struct.pack("<I", len(ix.data)))
        parts.append(ix.data)
        return b"".join(parts)

    def sign(self, *keypairs: Keypair) -> "Transaction":
        message = self.message_bytes()
        for keypair in keypairs:
            self.signatures[str(keypair.pubkey())] = str(keypair.sign_message(message))
        return self

    def signature_for(self, key: Pubkey) -> Optional[Signature]:
        text = self.signatures.get(str(key))
        return Signature.from_string(text) if text else None

    @property
    def signature(self) -> str:
        """Transaction id: the signature of the first signer account, if any."""
        for meta in self.instruction.accounts:
            if meta.is_signer and str(meta.pubkey) in self.signatures:
                return self.signatures[str(meta.pubkey)]
        return next(iter(self.signatures.values()), "")

    def to_dict(self) -> dict:
        return {
            "instruction": self.instruction.to_dict(),
            "signatures": dict(self.signatures),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        return cls(
            instruction=Instruction.from_dict(data["instruction"]),
            signatures=dict(data.get("signatures", {})),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "Transaction":
        return cls.from_dict(json.loads(json_str))
