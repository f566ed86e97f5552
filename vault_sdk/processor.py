"""
PDA Vault SDK - Program Entry

Routes an instruction on its first byte:
  0 -> Deposit  (payload: u64 LE amount)
  1 -> Withdraw (payload ignored)
"""

import logging
from typing import Sequence

from solders.pubkey import Pubkey

from .config import DEFAULT_CONFIG, VaultConfig
from .errors import MalformedRequest, UnknownOperation
from .instructions import Deposit, Withdraw
from .system import SystemProgram
from .vault_types import AccountInfo, Opcode

log = logging.getLogger(__name__)


def process_instruction(program_id: Pubkey,
                        accounts: Sequence[AccountInfo],
                        instruction_data: bytes,
                        system: SystemProgram,
                        config: VaultConfig = DEFAULT_CONFIG) -> Opcode:
    """
    Validate and execute one instruction; return the opcode that ran.

    Raises:
        VaultError: any rejection. Nothing has been transferred when this
            is raised by the program itself.
    """
    if not instruction_data:
        raise MalformedRequest("empty instruction data")

    tag, payload = instruction_data[0], bytes(instruction_data[1:])
    try:
        opcode = Opcode(tag)
    except ValueError:
        raise UnknownOperation(f"opcode {tag}")

    if opcode == Deposit.DISCRIMINATOR:
        Deposit.parse(payload, accounts, config).process(system)
    else:
        Withdraw.parse(accounts, config).process(system)
    log.debug(f"{opcode.name} processed for program {program_id}")

    return opcode
