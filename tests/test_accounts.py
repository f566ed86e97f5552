"""
Tests for vault account validation
"""

import unittest

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from vault_sdk.accounts import (
    DepositAccounts,
    WithdrawAccounts,
    validate_deposit_accounts,
    validate_withdraw_accounts,
)
from vault_sdk.config import SYSTEM_PROGRAM_ID
from vault_sdk.errors import (
    AddressMismatch,
    AlreadyInitialized,
    InvalidOwnership,
    MalformedRequest,
    Unauthorized,
)
from vault_sdk.pda import derive_vault_address
from vault_sdk.vault_types import AccountInfo


def account(key, lamports=0, owner=SYSTEM_PROGRAM_ID, signer=False, writable=True):
    return AccountInfo(key=key, owner=owner, lamports=lamports,
                       is_signer=signer, is_writable=writable)


class TestDepositAccounts(unittest.TestCase):

    def setUp(self):
        self.owner_key = Keypair().pubkey()
        self.vault_key, self.bump = derive_vault_address(self.owner_key)
        self.owner = account(self.owner_key, lamports=10_000, signer=True)
        self.vault = account(self.vault_key)
        self.system = account(SYSTEM_PROGRAM_ID, writable=False)

    def test_valid(self):
        validate_deposit_accounts(self.owner, self.vault)
        parsed = DepositAccounts.from_accounts([self.owner, self.vault, self.system])
        self.assertEqual(parsed.owner.key, self.owner_key)
        self.assertEqual(parsed.vault.key, self.vault_key)

    def test_owner_must_sign(self):
        unsigned = account(self.owner_key, lamports=10_000, signer=False)
        with self.assertRaises(Unauthorized):
            validate_deposit_accounts(unsigned, self.vault)

    def test_vault_must_be_system_owned(self):
        foreign = account(self.vault_key, owner=Pubkey.new_unique())
        with self.assertRaises(InvalidOwnership):
            validate_deposit_accounts(self.owner, foreign)

    def test_vault_must_be_empty(self):
        funded = account(self.vault_key, lamports=1)
        with self.assertRaises(AlreadyInitialized):
            validate_deposit_accounts(self.owner, funded)

    def test_vault_must_be_derived_address(self):
        with self.assertRaises(AddressMismatch):
            validate_deposit_accounts(self.owner, account(Pubkey.new_unique()))

    def test_another_owners_vault_rejected(self):
        other_vault, _ = derive_vault_address(Keypair().pubkey())
        with self.assertRaises(AddressMismatch):
            validate_deposit_accounts(self.owner, account(other_vault))

    def test_check_order(self):
        """Signer first, then ownership, then balance, then address"""
        unsigned = account(self.owner_key)
        bad_vault = account(Pubkey.new_unique(), lamports=5, owner=Pubkey.new_unique())
        with self.assertRaises(Unauthorized):
            validate_deposit_accounts(unsigned, bad_vault)
        with self.assertRaises(InvalidOwnership):
            validate_deposit_accounts(self.owner, bad_vault)
        with self.assertRaises(AlreadyInitialized):
            validate_deposit_accounts(self.owner, account(Pubkey.new_unique(), lamports=5))

    def test_account_count(self):
        with self.assertRaises(MalformedRequest):
            DepositAccounts.from_accounts([self.owner, self.vault])
        with self.assertRaises(MalformedRequest):
            DepositAccounts.from_accounts([self.owner, self.vault, self.system, self.system])

    def test_system_program_account_checked(self):
        impostor = account(Pubkey.new_unique(), writable=False)
        with self.assertRaises(MalformedRequest):
            DepositAccounts.from_accounts([self.owner, self.vault, impostor])


class TestWithdrawAccounts(unittest.TestCase):

    def setUp(self):
        self.owner_key = Keypair().pubkey()
        self.vault_key, self.bump = derive_vault_address(self.owner_key)
        self.owner = account(self.owner_key, signer=True)
        self.vault = account(self.vault_key, lamports=5_000)
        self.system = account(SYSTEM_PROGRAM_ID, writable=False)

    def test_returns_bump(self):
        self.assertEqual(validate_withdraw_accounts(self.owner, self.vault), self.bump)
        parsed = WithdrawAccounts.from_accounts([self.owner, self.vault, self.system])
        self.assertEqual(parsed.bump, self.bump)

    def test_funded_vault_allowed(self):
        validate_withdraw_accounts(self.owner, account(self.vault_key, lamports=10 ** 12))

    def test_empty_vault_allowed(self):
        validate_withdraw_accounts(self.owner, account(self.vault_key))

    def test_owner_must_sign(self):
        with self.assertRaises(Unauthorized):
            validate_withdraw_accounts(account(self.owner_key), self.vault)

    def test_vault_must_be_system_owned(self):
        foreign = account(self.vault_key, lamports=5_000, owner=Pubkey.new_unique())
        with self.assertRaises(InvalidOwnership):
            validate_withdraw_accounts(self.owner, foreign)

    def test_signer_cannot_claim_someone_elses_vault(self):
        attacker = account(Keypair().pubkey(), signer=True)
        with self.assertRaises(AddressMismatch):
            validate_withdraw_accounts(attacker, self.vault)

    def test_system_program_account_checked(self):
        impostor = account(Pubkey.new_unique(), writable=False)
        with self.assertRaises(MalformedRequest):
            WithdrawAccounts.from_accounts([self.owner, self.vault, impostor])


if __name__ == "__main__":
    unittest.main()
