# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Error values returned by the contract services.

Services never raise for business failures; they return ``Err(ContractError)``.
Messages are literal and stable because callers on the other side of the
gateway match on them.
"""

from enum import Enum

from attrs import field, frozen
from beartype import beartype

__all__ = [
    "ContractError",
    "ErrorKind",
    "LedgerConflictError",
    "LedgerError",
    "LedgerIOError",
]


class ErrorKind(str, Enum):
    """Failure categories surfaced to callers."""

    NOT_FOUND = "NOT_FOUND"
    CLAIM_NOT_FOUND = "CLAIM_NOT_FOUND"
    PRIVATE_DATA_NOT_FOUND = "PRIVATE_DATA_NOT_FOUND"
    LEDGER_IO_FAILURE = "LEDGER_IO_FAILURE"
    LEDGER_CONFLICT = "LEDGER_CONFLICT"
    INVALID_INPUT = "INVALID_INPUT"


@frozen
class ContractError:
    """A failed contract operation: what went wrong and the literal message."""

    kind: ErrorKind = field()
    message: str = field()

    def __str__(self) -> str:
        return self.message

    @classmethod
    @beartype
    def policy_not_found(cls, policy_id: str) -> "ContractError":
        """Policy key absent or empty."""
        return cls(ErrorKind.NOT_FOUND, f"La póliza {policy_id} no existe")

    @classmethod
    @beartype
    def claim_not_found(cls, claim_id: str, policy_id: str) -> "ContractError":
        """No claim with this id inside an existing policy."""
        return cls(
            ErrorKind.CLAIM_NOT_FOUND,
            f"La reclamación {claim_id} no existe para la póliza {policy_id}",
        )

    @classmethod
    @beartype
    def private_data_not_found(cls, policy_id: str) -> "ContractError":
        """Nothing stored in the private collection for this policy."""
        return cls(
            ErrorKind.PRIVATE_DATA_NOT_FOUND,
            f"No existen datos privados para la póliza {policy_id}",
        )

    @classmethod
    @beartype
    def history_not_found(cls, policy_id: str) -> "ContractError":
        """Key was never written, so there is no history to project."""
        return cls(
            ErrorKind.NOT_FOUND, f"No existe historial para la póliza {policy_id}"
        )

    @classmethod
    @beartype
    def invalid_input(cls, message: str) -> "ContractError":
        """Arguments that cannot be interpreted."""
        return cls(ErrorKind.INVALID_INPUT, message)

    @classmethod
    @beartype
    def from_ledger(cls, exc: "LedgerError") -> "ContractError":
        """Carry a substrate failure through with its message unchanged."""
        kind = (
            ErrorKind.LEDGER_CONFLICT
            if isinstance(exc, LedgerConflictError)
            else ErrorKind.LEDGER_IO_FAILURE
        )
        return cls(kind, str(exc))


class LedgerError(Exception):
    """Base class for failures raised by a ledger substrate."""


class LedgerIOError(LedgerError):
    """A substrate read or write failed."""


class LedgerConflictError(LedgerError):
    """The substrate rejected a commit because a key it read has changed."""
