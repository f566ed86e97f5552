"""
PDA Vault SDK - Configuration

Process-wide constants: program identity, system program identity and the
vault namespace seed. Built once at startup, never mutated.
"""

import os
from dataclasses import dataclass

from solders.pubkey import Pubkey

# =============================================================================
# CONSTANTS
# =============================================================================

# Deployed vault program
PROGRAM_ID = Pubkey(bytes([
    0x0f, 0x1e, 0x6b, 0x14, 0x21, 0xc0, 0x4a, 0x07,
    0x04, 0x31, 0x26, 0x5c, 0x19, 0xc5, 0xbb, 0xee,
    0x19, 0x92, 0xba, 0xe8, 0xaf, 0xd1, 0xcd, 0x07,
    0x8e, 0xf8, 0xaf, 0x70, 0x47, 0xdc, 0x11, 0xf7,
]))

SYSTEM_PROGRAM_ID = Pubkey.from_string("11111111111111111111111111111111")

VAULT_SEED = b"vault"

DEFAULT_RPC_URL = "http://127.0.0.1:8899"


@dataclass(frozen=True)
class VaultConfig:
    program_id: Pubkey = PROGRAM_ID
    system_program_id: Pubkey = SYSTEM_PROGRAM_ID
    vault_seed: bytes = VAULT_SEED

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """Build config from VAULT_PROGRAM_ID / VAULT_SYSTEM_PROGRAM_ID (base58)."""
        program_id = os.environ.get("VAULT_PROGRAM_ID", "")
        system_program_id = os.environ.get("VAULT_SYSTEM_PROGRAM_ID", "")
        return cls(
            program_id=Pubkey.from_string(program_id) if program_id else PROGRAM_ID,
            system_program_id=(Pubkey.from_string(system_program_id)
                               if system_program_id else SYSTEM_PROGRAM_ID),
        )

    def to_dict(self) -> dict:
        return {
            "program_id": str(self.program_id),
            "system_program_id": str(self.system_program_id),
            "vault_seed": self.vault_seed.decode("ascii"),
        }


DEFAULT_CONFIG = VaultConfig()
