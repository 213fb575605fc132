"""Premium quote endpoint."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ...models.premium import PremiumQuote, PremiumRequest
from ...services.premium_calculator import calculate_premium
from ..response_patterns import handle_result

router = APIRouter()


@router.post("/premium")
async def quote_premium(request: PremiumRequest) -> JSONResponse:
    """Price a policy from the lookup tables; nothing is written."""
    result = calculate_premium(request.kind, request.insured_value, request.risk_tier)
    return handle_result(
        result, lambda premium: PremiumQuote(premium=premium).model_dump(by_alias=True)
    )
