# Copyright (c) 2025 The pda-vault developers
# Distributed under the MIT software license

"""
PDA Vault command line

  serve     Run a local vault node (in-memory ledger)
  keygen    Write a new keypair file
  derive    Print the vault address and bump for an owner
  vault     Show vault state from a node
  balance   Show an account balance from a node
  airdrop   Fund an account on a local node
  deposit   Deposit lamports into your vault
  withdraw  Withdraw your whole vault balance
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from .config import DEFAULT_RPC_URL, VaultConfig
from .errors import VaultError
from .pda import derive_vault_address
from .rpc_client import RPCClient, RPCError
from .vault_wrapper import VaultClient

log = logging.getLogger(__name__)


# =============================================================================
# KEYPAIR FILES
# =============================================================================

def load_keypair(path: str) -> Keypair:
    """Read a keypair file: JSON array of 64 byte values."""
    data = json.loads(Path(path).expanduser().read_text())
    return Keypair.from_bytes(bytes(data))


def save_keypair(keypair: Keypair, path: str):
    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(list(bytes(keypair))))
    target.chmod(0o600)


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_serve(args, config: VaultConfig) -> int:
    import uvicorn
    from .ledger import Ledger
    from .server import create_app

    log.info(f"Vault node for program {config.program_id} on {args.host}:{args.port}")
    uvicorn.run(create_app(Ledger(config)), host=args.host, port=args.port,
                log_level=args.log_level.lower())
    return 0


def cmd_keygen(args, config: VaultConfig) -> int:
    if Path(args.outfile).expanduser().exists() and not args.force:
        print(f"Refusing to overwrite {args.outfile} (use --force)", file=sys.stderr)
        return 1
    keypair = Keypair()
    save_keypair(keypair, args.outfile)
    print(keypair.pubkey())
    return 0


def cmd_derive(args, config: VaultConfig) -> int:
    address, bump = derive_vault_address(Pubkey.from_string(args.owner), config)
    print(json.dumps({"vault": str(address), "bump": bump}, indent=2))
    return 0


def cmd_vault(args, config: VaultConfig) -> int:
    print(json.dumps(RPCClient(args.url).get_vault(Pubkey.from_string(args.owner)), indent=2))
    return 0


def cmd_balance(args, config: VaultConfig) -> int:
    print(RPCClient(args.url).get_balance(Pubkey.from_string(args.pubkey)))
    return 0


def cmd_airdrop(args, config: VaultConfig) -> int:
    print(RPCClient(args.url).airdrop(Pubkey.from_string(args.pubkey), args.lamports))
    return 0


def cmd_deposit(args, config: VaultConfig) -> int:
    client = VaultClient(RPCClient(args.url), config)
    print(client.deposit(load_keypair(args.keypair), args.amount))
    return 0


def cmd_withdraw(args, config: VaultConfig) -> int:
    client = VaultClient(RPCClient(args.url), config)
    print(client.withdraw(load_keypair(args.keypair)))
    return 0


# =============================================================================
# MAIN
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pda-vault", description="PDA vault tools")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run a local vault node")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8899)
    serve.set_defaults(func=cmd_serve)

    keygen = sub.add_parser("keygen", help="Write a new keypair file")
    keygen.add_argument("outfile")
    keygen.add_argument("--force", action="store_true", help="Overwrite an existing file")
    keygen.set_defaults(func=cmd_keygen)

    derive = sub.add_parser("derive", help="Derive the vault address for an owner")
    derive.add_argument("owner", help="Owner pubkey (base58)")
    derive.set_defaults(func=cmd_derive)

    for name, func, helptext in (
        ("vault", cmd_vault, "Show vault state"),
        ("balance", cmd_balance, "Show account balance"),
    ):
        p = sub.add_parser(name, help=helptext)
        p.add_argument("owner" if name == "vault" else "pubkey")
        p.add_argument("--url", default=DEFAULT_RPC_URL, help="Node URL")
        p.set_defaults(func=func)

    airdrop = sub.add_parser("airdrop", help="Fund an account on a local node")
    airdrop.add_argument("pubkey")
    airdrop.add_argument("lamports", type=int)
    airdrop.add_argument("--url", default=DEFAULT_RPC_URL, help="Node URL")
    airdrop.set_defaults(func=cmd_airdrop)

    deposit = sub.add_parser("deposit", help="Deposit into your vault")
    deposit.add_argument("--keypair", required=True, help="Owner keypair file")
    deposit.add_argument("--amount", type=int, required=True, help="Lamports")
    deposit.add_argument("--url", default=DEFAULT_RPC_URL, help="Node URL")
    deposit.set_defaults(func=cmd_deposit)

    withdraw = sub.add_parser("withdraw", help="Withdraw your whole vault balance")
    withdraw.add_argument("--keypair", required=True, help="Owner keypair file")
    withdraw.add_argument("--url", default=DEFAULT_RPC_URL, help="Node URL")
    withdraw.set_defaults(func=cmd_withdraw)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    config = VaultConfig.from_env()
    try:
        return args.func(args, config)
    except VaultError as e:
        print(f"Rejected: {e}", file=sys.stderr)
        return 2
    except RPCError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 1
