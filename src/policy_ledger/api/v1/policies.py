# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Policy endpoints.

Creation keeps the gateway contract existing clients rely on: 201 with the
stored record, or 500 with ``{"error": message}`` for any failure, including
a malformed body. The other routes map error kinds to status codes.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ...core.config import Settings
from ...core.errors import ContractError
from ...core.logging_utils import get_logger
from ...gateway import LedgerGateway
from ...models.policy import PolicyCancel, PolicyCreate, PolicyRenew
from ...services.history_service import HistoryService
from ...services.policy_service import PolicyService
from ...services.private_data_service import PrivateDataService
from ..dependencies import get_app_settings, get_gateway
from ..response_patterns import APIResponseHandler, handle_result

logger = get_logger(__name__)

router = APIRouter()
legacy_router = APIRouter()


async def _create_policy(payload: dict[str, Any], gateway: LedgerGateway) -> JSONResponse:
    try:
        policy_data = PolicyCreate.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Rejected policy creation body: %s", exc)
        return APIResponseHandler.error_response(
            ContractError.invalid_input(str(exc)),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    result = await gateway.submit(
        lambda stub: PolicyService(stub).create_policy(
            policy_data.id,
            policy_data.holder,
            policy_data.kind,
            policy_data.insured_value,
            policy_data.term_months,
        )
    )
    if result.is_err():
        return APIResponseHandler.error_response(
            result.unwrap_err(), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    return JSONResponse(
        status_code=status.HTTP_201_CREATED, content=result.unwrap().to_wire()
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_policy(
    payload: dict[str, Any] = Body(...),
    gateway: LedgerGateway = Depends(get_gateway),
) -> JSONResponse:
    """Create a policy and return the stored record."""
    return await _create_policy(payload, gateway)


@legacy_router.post("/api/polizas", status_code=status.HTTP_201_CREATED)
async def create_policy_legacy(
    payload: dict[str, Any] = Body(...),
    gateway: LedgerGateway = Depends(get_gateway),
) -> JSONResponse:
    """Create a policy through the path older clients call."""
    return await _create_policy(payload, gateway)


@router.get("/{policy_id}")
async def get_policy(
    policy_id: str, gateway: LedgerGateway = Depends(get_gateway)
) -> JSONResponse:
    """Current record of a policy."""
    result = await gateway.evaluate(lambda stub: PolicyService(stub).get_policy(policy_id))
    return handle_result(result, lambda policy: policy.to_wire())


@router.post("/{policy_id}/renew")
async def renew_policy(
    policy_id: str,
    renewal: PolicyRenew,
    gateway: LedgerGateway = Depends(get_gateway),
) -> JSONResponse:
    """Replace the policy term."""
    result = await gateway.submit(
        lambda stub: PolicyService(stub).renew_policy(policy_id, renewal.term_months)
    )
    return handle_result(result, lambda policy: policy.to_wire())


@router.post("/{policy_id}/cancel")
async def cancel_policy(
    policy_id: str,
    cancellation: PolicyCancel,
    gateway: LedgerGateway = Depends(get_gateway),
) -> JSONResponse:
    """Cancel the policy with a reason."""
    result = await gateway.submit(
        lambda stub: PolicyService(stub).cancel_policy(policy_id, cancellation.reason)
    )
    return handle_result(result, lambda policy: policy.to_wire())


@router.get("/{policy_id}/history")
async def get_policy_history(
    policy_id: str, gateway: LedgerGateway = Depends(get_gateway)
) -> JSONResponse:
    """Every committed version of the policy, oldest first."""
    result = await gateway.evaluate(lambda stub: HistoryService(stub).get_history(policy_id))
    return handle_result(result, lambda entries: [entry.to_wire() for entry in entries])


@router.put("/{policy_id}/private")
async def store_private_data(
    policy_id: str,
    request: Request,
    gateway: LedgerGateway = Depends(get_gateway),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    """Store the raw request body in the private collection."""
    payload = await request.body()
    collection = settings.private_collection
    result = await gateway.submit(
        lambda stub: PrivateDataService(stub, collection).store_private(policy_id, payload)
    )
    return handle_result(result, lambda _: {"stored": len(payload)})


@router.get("/{policy_id}/private", response_model=None)
async def get_private_data(
    policy_id: str,
    gateway: LedgerGateway = Depends(get_gateway),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """Return the stored private bytes unchanged."""
    collection = settings.private_collection
    result = await gateway.evaluate(
        lambda stub: PrivateDataService(stub, collection).get_private(policy_id)
    )
    if result.is_err():
        return APIResponseHandler.error_response(result.unwrap_err())
    return Response(content=result.unwrap(), media_type="application/octet-stream")
