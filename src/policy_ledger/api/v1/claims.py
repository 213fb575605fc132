"""Claim endpoints, nested under their policy."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ...gateway import LedgerGateway
from ...models.claim import ClaimCreate, ClaimProcess
from ...services.claim_service import ClaimService
from ..dependencies import get_gateway
from ..response_patterns import handle_result

router = APIRouter()


@router.post("/{policy_id}/claims", status_code=status.HTTP_201_CREATED)
async def register_claim(
    policy_id: str,
    claim_data: ClaimCreate,
    gateway: LedgerGateway = Depends(get_gateway),
) -> JSONResponse:
    """File a claim against a policy."""
    result = await gateway.submit(
        lambda stub: ClaimService(stub).register_claim(
            claim_data.claim_id,
            policy_id,
            claim_data.description,
            claim_data.amount,
        )
    )
    return handle_result(
        result, lambda claim: claim.to_wire(), success_status=status.HTTP_201_CREATED
    )


@router.post("/{policy_id}/claims/{claim_id}/process")
async def process_claim(
    policy_id: str,
    claim_id: str,
    outcome: ClaimProcess,
    gateway: LedgerGateway = Depends(get_gateway),
) -> JSONResponse:
    """Record the outcome of a claim."""
    result = await gateway.submit(
        lambda stub: ClaimService(stub).process_claim(
            claim_id, policy_id, outcome.status, outcome.comment
        )
    )
    return handle_result(result, lambda claim: claim.to_wire())
