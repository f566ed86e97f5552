"""
Tests for the command line and configuration
"""

import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from vault_sdk.cli import load_keypair, main, save_keypair
from vault_sdk.config import PROGRAM_ID, SYSTEM_PROGRAM_ID, VaultConfig
from vault_sdk.pda import derive_vault_address


def run(argv):
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = main(argv)
    return code, out.getvalue(), err.getvalue()


class TestCLI(unittest.TestCase):

    def test_derive(self):
        owner = Keypair().pubkey()
        code, out, _ = run(["derive", str(owner)])
        self.assertEqual(code, 0)
        address, bump = derive_vault_address(owner)
        self.assertEqual(json.loads(out), {"vault": str(address), "bump": bump})

    def test_derive_invalid_key(self):
        code, _, err = run(["derive", "not-base58!"])
        self.assertEqual(code, 1)
        self.assertIn("Invalid input", err)

    def test_keygen_round_trip(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "owner.json")
            code, out, _ = run(["keygen", path])
            self.assertEqual(code, 0)
            self.assertEqual(str(load_keypair(path).pubkey()), out.strip())

            code, _, err = run(["keygen", path])
            self.assertEqual(code, 1)
            self.assertIn("Refusing", err)

    def test_save_load_keypair(self):
        keypair = Keypair()
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "k.json")
            save_keypair(keypair, path)
            self.assertEqual(load_keypair(path).pubkey(), keypair.pubkey())

    def test_unreachable_node(self):
        code, _, err = run(["balance", str(Keypair().pubkey()), "--url", "http://127.0.0.1:1"])
        self.assertEqual(code, 1)
        self.assertIn("RPC Error -1", err)


class TestConfig(unittest.TestCase):

    def test_defaults(self):
        config = VaultConfig()
        self.assertEqual(config.program_id, PROGRAM_ID)
        self.assertEqual(config.system_program_id, SYSTEM_PROGRAM_ID)
        self.assertEqual(config.vault_seed, b"vault")
        self.assertEqual(bytes(SYSTEM_PROGRAM_ID), bytes(32))

    def test_from_env(self):
        program = Pubkey.new_unique()
        with mock.patch.dict(os.environ, {"VAULT_PROGRAM_ID": str(program)}):
            config = VaultConfig.from_env()
        self.assertEqual(config.program_id, program)
        self.assertEqual(config.system_program_id, SYSTEM_PROGRAM_ID)

    def test_from_env_empty(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(VaultConfig.from_env(), VaultConfig())

    def test_frozen(self):
        with self.assertRaises(AttributeError):
            VaultConfig().program_id = Pubkey.new_unique()


if __name__ == "__main__":
    unittest.main()
