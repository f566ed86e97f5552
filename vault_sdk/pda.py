"""
PDA Vault SDK - Program Derived Addresses

A program address is SHA256(seeds || program_id || "ProgramDerivedAddress")
and is valid only if it does NOT decode to an ed25519 curve point, so no
private key can exist for it. The bump byte is appended to the seeds and
decremented from 255 until the hash lands off the curve.

Usage:
    vault, bump = derive_vault_address(owner)
    signer = vault_signer_seeds(owner, bump)
    assert create_program_address(signer.seeds, PROGRAM_ID) == vault
"""

import hashlib
from typing import Sequence

from solders.pubkey import Pubkey

from .config import DEFAULT_CONFIG, VaultConfig
from .errors import InvalidSeeds
from .vault_types import DerivationResult, SignerSeeds

MAX_SEEDS = 16
MAX_SEED_LEN = 32
PDA_MARKER = b"ProgramDerivedAddress"


def _hash_seeds(seeds: Sequence[bytes], program_id: Pubkey) -> Pubkey:
    if len(seeds) > MAX_SEEDS:
        raise InvalidSeeds(f"{len(seeds)} seeds (max {MAX_SEEDS})")

    hasher = hashlib.sha256()
    for seed in seeds:
        if len(seed) > MAX_SEED_LEN:
            raise InvalidSeeds(f"seed of {len(seed)} bytes (max {MAX_SEED_LEN})")
        hasher.update(seed)
    hasher.update(bytes(program_id))
    hasher.update(PDA_MARKER)
    return Pubkey(hasher.digest())


def create_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> Pubkey:
    """
    Hash seeds into a program address.

    Raises:
        InvalidSeeds: too many seeds, a seed longer than 32 bytes, or the
            hash is a valid curve point
    """
    address = _hash_seeds(seeds, program_id)
    if address.is_on_curve():
        raise InvalidSeeds("derived address is on the ed25519 curve")
    return address


def find_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> DerivationResult:
    """Return the first valid (address, bump), searching bumps 255 down to 0."""
    seeds = [bytes(s) for s in seeds]
    if len(seeds) >= MAX_SEEDS:
        raise InvalidSeeds(f"{len(seeds)} seeds leaves no room for a bump")

    for bump in range(255, -1, -1):
        address = _hash_seeds(seeds + [bytes([bump])], program_id)
        if not address.is_on_curve():
            return DerivationResult(address, bump)

    # 2^-256 odds; treat as a bug, not a runtime condition
    raise InvalidSeeds("no bump produces an off-curve address")


def vault_seeds(owner: Pubkey, config: VaultConfig = DEFAULT_CONFIG) -> list:
    return [config.vault_seed, bytes(owner)]


def derive_vault_address(owner: Pubkey,
                         config: VaultConfig = DEFAULT_CONFIG) -> DerivationResult:
    """Derive the vault for `owner`. Pure; recomputed on every call."""
    return find_program_address(vault_seeds(owner, config), config.program_id)


def vault_signer_seeds(owner: Pubkey, bump: int,
                       config: VaultConfig = DEFAULT_CONFIG) -> SignerSeeds:
    """Rebuild the exact seed sequence used at derivation time, bump included."""
    if not 0 <= bump <= 255:
        raise InvalidSeeds(f"bump {bump} out of range")
    return SignerSeeds(tuple(vault_seeds(owner, config)) + (bytes([bump]),))
