# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Claim business logic service."""

from beartype import beartype

from ..core.errors import ContractError
from ..core.logging_utils import get_logger
from ..core.result_types import Err, Ok, Result
from ..ledger.stub import LedgerStub
from ..models.base import iso_timestamp
from ..models.claim import Claim, ClaimStatus
from .policy_service import Clock, load_policy, store_policy, utc_now

logger = get_logger(__name__)


class ClaimService:
    """Claims lifecycle against the claim list embedded in a policy.

    Claims are found by linear scan in filing order. Duplicate claim ids are
    accepted at registration; processing always hits the first match.
    """

    def __init__(self, stub: LedgerStub, clock: Clock | None = None) -> None:
        """Initialize claim service with dependency validation."""
        if not isinstance(stub, LedgerStub):
            raise ValueError("Ledger stub required and must expose the ledger operations")

        self._stub = stub
        self._clock = clock or utc_now

    @beartype
    async def register_claim(
        self,
        claim_id: str,
        policy_id: str,
        description: str,
        amount: str,
    ) -> Result[Claim, ContractError]:
        """Append a PENDING claim to the policy and return it."""
        loaded = await load_policy(self._stub, policy_id)
        if isinstance(loaded, Err):
            return loaded

        policy = loaded.unwrap()
        claim = Claim(
            id=claim_id,
            description=description,
            amount=amount,
            status=ClaimStatus.PENDING.value,
            filed_at=iso_timestamp(self._clock()),
        )

        stored = await store_policy(
            self._stub, policy.model_copy(update={"claims": (*policy.claims, claim)})
        )
        if isinstance(stored, Err):
            return stored

        logger.info("Registered claim %s on policy %s", claim_id, policy_id)
        return Ok(claim)

    @beartype
    async def process_claim(
        self,
        claim_id: str,
        policy_id: str,
        new_status: str,
        comment: str,
    ) -> Result[Claim, ContractError]:
        """Record an outcome on the first claim with ``claim_id``.

        The status is free text; a claim that was already processed is
        simply overwritten.
        """
        loaded = await load_policy(self._stub, policy_id)
        if isinstance(loaded, Err):
            return loaded

        policy = loaded.unwrap()
        index = policy.find_claim(claim_id)
        if index is None:
            return Err(ContractError.claim_not_found(claim_id, policy_id))

        processed = policy.claims[index].model_copy(
            update={
                "status": new_status,
                "comment": comment,
                "processed_at": iso_timestamp(self._clock()),
            }
        )
        claims = list(policy.claims)
        claims[index] = processed

        stored = await store_policy(
            self._stub, policy.model_copy(update={"claims": tuple(claims)})
        )
        if isinstance(stored, Err):
            return stored

        logger.info(
            "Processed claim %s on policy %s as %s", claim_id, policy_id, new_status
        )
        return Ok(processed)
