"""
PDA Vault SDK - Vault Wrapper

High-level vault operations over a backend: an in-process Ledger or an
RPCClient pointed at a running node. Both expose execute(), get_account()
and get_balance().

Usage:
    vault = VaultClient(Ledger())

    # Where the owner's funds will live
    address, bump = vault.vault_address(owner.pubkey())

    # Lock funds, then take everything back
    vault.deposit(owner, 1_000_000)
    vault.withdraw(owner)
"""

import logging

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from .config import DEFAULT_CONFIG, VaultConfig
from .pda import derive_vault_address
from .transaction import Transaction, build_deposit_instruction, build_withdraw_instruction
from .vault_types import DerivationResult, VaultState, short_key

log = logging.getLogger(__name__)


class VaultClient:

    def __init__(self, backend, config: VaultConfig = DEFAULT_CONFIG):
        """
        Initialize vault client.

        Args:
            backend: Ledger or RPCClient
            config: program identity to derive against
        """
        self.backend = backend
        self.config = config

    def vault_address(self, owner: Pubkey) -> DerivationResult:
        return derive_vault_address(owner, self.config)

    def balance(self, key: Pubkey) -> int:
        return self.backend.get_balance(key)

    def vault_balance(self, owner: Pubkey) -> int:
        return self.balance(self.vault_address(owner).address)

    def vault_state(self, owner: Pubkey) -> VaultState:
        """FUNDED if the vault holds lamports, otherwise UNINITIALIZED."""
        if self.vault_balance(owner) > 0:
            return VaultState.FUNDED
        return VaultState.UNINITIALIZED

    def vault_info(self, owner: Pubkey) -> dict:
        address, bump = self.vault_address(owner)
        lamports = self.balance(address)
        return {
            "owner": str(owner),
            "vault": str(address),
            "bump": bump,
            "lamports": lamports,
            "state": (VaultState.FUNDED if lamports > 0 else VaultState.UNINITIALIZED).value,
        }

    def deposit(self, owner: Keypair, amount: int) -> str:
        """
        Move `amount` lamports from the owner into their vault.

        Returns:
            Transaction signature
        """
        ix = build_deposit_instruction(owner.pubkey(), amount, self.config)
        signature = self.backend.execute(Transaction(ix).sign(owner))
        log.info(f"Deposited {amount} for {short_key(owner.pubkey())}: {short_key(signature)}")
        return signature

    def withdraw(self, owner: Keypair) -> str:
        """
        Return the vault's whole balance to its owner.

        Returns:
            Transaction signature
        """
        ix = build_withdraw_instruction(owner.pubkey(), self.config)
        signature = self.backend.execute(Transaction(ix).sign(owner))
        log.info(f"Withdrew vault of {short_key(owner.pubkey())}: {short_key(signature)}")
        return signature
