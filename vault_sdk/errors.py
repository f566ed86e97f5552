"""
PDA Vault SDK - Errors

Every rejection is terminal for the request: nothing is retried and no
partial effect survives. Codes are stable and travel over the HTTP API.
"""

from typing import Dict, Type


class VaultError(Exception):
    """Vault program rejected the request."""
    code = 0

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__name__
        super().__init__(f"{self.__class__.__name__} ({self.code}): {self.message}")

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict:
        return {"error": self.name, "code": self.code, "message": self.message}


class MalformedRequest(VaultError):
    """Wrong account count, wrong payload length, or wrong system program."""
    code = 1


class Unauthorized(VaultError):
    """Required signer did not sign."""
    code = 2


class InvalidOwnership(VaultError):
    """Vault account is not controlled by the system program."""
    code = 3


class AlreadyInitialized(VaultError):
    """Vault balance is non-zero at deposit time."""
    code = 4


class AddressMismatch(VaultError):
    """Supplied vault address differs from the derived one."""
    code = 5


class InvalidAmount(VaultError):
    """Deposit amount is zero."""
    code = 6


class UnknownOperation(VaultError):
    """Unrecognized opcode."""
    code = 7


class InvalidSeeds(VaultError):
    """Seeds cannot produce a program address."""
    code = 8


# =============================================================================
# HOST / TRANSFER PRIMITIVE ERRORS
# =============================================================================

class TransferError(VaultError):
    """System transfer primitive refused to move funds."""
    code = 100


class MissingRequiredSignature(TransferError):
    code = 101


class InsufficientFunds(TransferError):
    code = 102


class AccountNotWritable(TransferError):
    code = 103


class InvalidSourceOwner(TransferError):
    code = 104


class SignatureVerificationFailed(VaultError):
    """Transaction signature does not verify against its message."""
    code = 200


class ProgramNotFound(VaultError):
    """Transaction targets a program the ledger does not host."""
    code = 201


ERRORS_BY_CODE: Dict[int, Type[VaultError]] = {
    cls.code: cls for cls in (
        MalformedRequest, Unauthorized, InvalidOwnership, AlreadyInitialized,
        AddressMismatch, InvalidAmount, UnknownOperation, InvalidSeeds,
        TransferError, MissingRequiredSignature, InsufficientFunds,
        AccountNotWritable, InvalidSourceOwner, SignatureVerificationFailed,
        ProgramNotFound,
    )
}


def error_from_dict(data: dict) -> VaultError:
    """Rebuild a VaultError from its to_dict() form (unknown codes -> VaultError)."""
    cls = ERRORS_BY_CODE.get(int(data.get("code", 0)), VaultError)
    return cls(data.get("message", ""))
