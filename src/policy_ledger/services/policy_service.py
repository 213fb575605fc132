# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Policy business logic service."""

from collections.abc import Callable
from datetime import datetime, timezone

from beartype import beartype
from pydantic import ValidationError

from ..core.errors import ContractError, LedgerError
from ..core.logging_utils import get_logger
from ..core.result_types import Err, Ok, Result
from ..ledger.stub import LedgerStub
from ..models.base import iso_timestamp
from ..models.policy import Policy, PolicyStatus

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(timezone.utc)


@beartype
async def load_policy(stub: LedgerStub, policy_id: str) -> Result[Policy, ContractError]:
    """Read and decode the policy stored under ``policy_id``."""
    try:
        raw = await stub.get_state(policy_id)
    except LedgerError as exc:
        logger.warning("Ledger read failed for policy %s: %s", policy_id, exc)
        return Err(ContractError.from_ledger(exc))

    if not raw:
        return Err(ContractError.policy_not_found(policy_id))

    try:
        return Ok(Policy.model_validate_json(raw))
    except ValidationError as exc:
        logger.warning("Stored policy %s does not decode: %s", policy_id, exc)
        return Err(
            ContractError.invalid_input(f"La póliza {policy_id} tiene un formato inválido")
        )


@beartype
async def store_policy(stub: LedgerStub, policy: Policy) -> Result[Policy, ContractError]:
    """Write the full policy record back under its id."""
    try:
        await stub.put_state(policy.id, policy.to_bytes())
    except LedgerError as exc:
        logger.warning("Ledger write failed for policy %s: %s", policy.id, exc)
        return Err(ContractError.from_ledger(exc))
    return Ok(policy)


class PolicyService:
    """Policy state machine: ACTIVE on creation, CANCELLED is terminal.

    Every mutation reads the whole record, changes it, and writes the whole
    record back through the stub of the current transaction.
    """

    def __init__(self, stub: LedgerStub, clock: Clock | None = None) -> None:
        """Initialize policy service with dependency validation."""
        if not isinstance(stub, LedgerStub):
            raise ValueError("Ledger stub required and must expose the ledger operations")

        self._stub = stub
        self._clock = clock or utc_now

    @beartype
    async def create_policy(
        self,
        policy_id: str,
        holder: str,
        kind: str,
        insured_value: str,
        term_months: str,
    ) -> Result[Policy, ContractError]:
        """Create a policy, overwriting any record already stored under the id."""
        logger.info("Creating policy %s", policy_id)
        policy = Policy(
            id=policy_id,
            holder=holder,
            kind=kind,
            insured_value=insured_value,
            term_months=term_months,
            status=PolicyStatus.ACTIVE,
            created_at=iso_timestamp(self._clock()),
            claims=(),
        )
        return await store_policy(self._stub, policy)

    @beartype
    async def get_policy(self, policy_id: str) -> Result[Policy, ContractError]:
        """Get policy by id."""
        return await load_policy(self._stub, policy_id)

    @beartype
    async def renew_policy(
        self, policy_id: str, new_term_months: str
    ) -> Result[Policy, ContractError]:
        """Replace the term and stamp the renewal time.

        Cancelled policies can be renewed too; status is left untouched.
        """
        loaded = await load_policy(self._stub, policy_id)
        if isinstance(loaded, Err):
            return loaded

        logger.info("Renewing policy %s for %s months", policy_id, new_term_months)
        renewed = loaded.unwrap().model_copy(
            update={
                "term_months": new_term_months,
                "renewed_at": iso_timestamp(self._clock()),
            }
        )
        return await store_policy(self._stub, renewed)

    @beartype
    async def cancel_policy(
        self, policy_id: str, reason: str
    ) -> Result[Policy, ContractError]:
        """Move the policy to CANCELLED with a reason and timestamp."""
        loaded = await load_policy(self._stub, policy_id)
        if isinstance(loaded, Err):
            return loaded

        logger.info("Cancelling policy %s", policy_id)
        cancelled = loaded.unwrap().model_copy(
            update={
                "status": PolicyStatus.CANCELLED,
                "cancellation_reason": reason,
                "cancelled_at": iso_timestamp(self._clock()),
            }
        )
        return await store_policy(self._stub, cancelled)
