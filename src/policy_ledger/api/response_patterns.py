"""API response patterns following Result[T,E] + HTTP semantics."""

from collections.abc import Callable
from typing import Any

from beartype import beartype
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..core.errors import ContractError, ErrorKind
from ..core.result_types import Result


@beartype
class ErrorResponse(BaseModel):
    """Standardized error body for business logic failures."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    error: str = Field(..., description="Human-readable error message")
    error_code: str | None = Field(default=None, description="Machine-readable error code")


_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CLAIM_NOT_FOUND: 404,
    ErrorKind.PRIVATE_DATA_NOT_FOUND: 404,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.LEDGER_CONFLICT: 409,
    ErrorKind.LEDGER_IO_FAILURE: 500,
}


class APIResponseHandler:
    """Converts service results into HTTP responses."""

    @staticmethod
    @beartype
    def map_error_to_status(error: ContractError) -> int:
        """Map a contract error kind to a RESTful status code."""
        return _STATUS_BY_KIND.get(error.kind, 500)

    @staticmethod
    @beartype
    def error_response(error: ContractError, status_code: int | None = None) -> JSONResponse:
        """JSON error body with the literal message."""
        body = ErrorResponse(error=error.message, error_code=error.kind.value)
        return JSONResponse(
            status_code=status_code or APIResponseHandler.map_error_to_status(error),
            content=body.model_dump(exclude_none=True),
        )

    @staticmethod
    @beartype
    def from_result(
        result: Result[Any, ContractError],
        render: Callable[[Any], Any],
        success_status: int = 200,
    ) -> JSONResponse:
        """Render ``Ok`` with ``render`` or ``Err`` as an error body."""
        if result.is_err():
            return APIResponseHandler.error_response(result.unwrap_err())
        return JSONResponse(status_code=success_status, content=render(result.unwrap()))


@beartype
def handle_result(
    result: Result[Any, ContractError],
    render: Callable[[Any], Any],
    success_status: int = 200,
) -> JSONResponse:
    """Convenience function for standard result handling."""
    return APIResponseHandler.from_result(result, render, success_status)
