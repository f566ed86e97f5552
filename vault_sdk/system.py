"""
PDA Vault SDK - System Transfer Primitive

Contract of the host's native "move lamports from A to B" operation. The
vault program only calls it; the ledger provides the implementation.
"""

from abc import ABC, abstractmethod

from .vault_types import AccountInfo, SignerSeeds


class SystemProgram(ABC):
    """
    Native value transfer, invoked as the last step of a request.

    transfer() requires `source` to have signed the request.
    transfer_signed() accepts `signer_seeds` instead: the primitive re-derives
    the program address from the seeds and the invoking program id and only
    moves funds if it equals `source.key`.
    """

    @abstractmethod
    def transfer(self, source: AccountInfo, destination: AccountInfo,
                 lamports: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def transfer_signed(self, source: AccountInfo, destination: AccountInfo,
                        lamports: int, signer_seeds: SignerSeeds) -> None:
        raise NotImplementedError
