"""Error envelope and exception handlers."""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..services.errors import InvalidPaymentCodeError

logger = structlog.get_logger(__name__)


class APIError(Exception):
    """Base API error with error envelope"""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    @classmethod
    def from_invalid_code(cls, exc: InvalidPaymentCodeError) -> "APIError":
        return cls(
            code=exc.kind.value,
            message="Not a valid UPI payment code",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"reason": exc.detail},
        )


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def create_error_response(
    code: str,
    message: str,
    request_id: str,
    details: Optional[Dict[str, Any]] = None,
    status_code: int = 400,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "request_id": request_id,
                "details": jsonable_encoder(details or {}),
            }
        },
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    logger.warning("api_error", code=exc.code, status_code=exc.status_code, path=request.url.path)
    return create_error_response(exc.code, exc.message, _request_id(request), exc.details, exc.status_code)


async def invalid_code_handler(request: Request, exc: InvalidPaymentCodeError) -> JSONResponse:
    return await api_error_handler(request, APIError.from_invalid_code(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("validation_error", errors=len(exc.errors()), path=request.url.path)
    return create_error_response(
        code="VALIDATION_ERROR",
        message="Request validation failed",
        request_id=_request_id(request),
        details={"errors": exc.errors()},
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning("http_exception", status_code=exc.status_code, detail=exc.detail, path=request.url.path)
    return create_error_response(
        code="HTTP_ERROR",
        message=str(exc.detail),
        request_id=_request_id(request),
        status_code=exc.status_code,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", exc_info=exc, path=request.url.path)
    return create_error_response(
        code="INTERNAL_ERROR",
        message="An internal error occurred",
        request_id=_request_id(request),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
