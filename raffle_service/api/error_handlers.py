# raffle_service/api/error_handlers.py
"""
Maps the service error taxonomy onto HTTP responses.

Body shape: {"error": <code>, "message": <text>, "field": <field or null>}
"""

import logging
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from raffle_service.core.errors import ErrorCode, RaffleServiceError

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_REFERRAL: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_OPERATION_NUMBER: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INSUFFICIENT_INVENTORY: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.TRANSACTION_CONFLICT: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.PERSISTENCE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

RETRY_AFTER_SECONDS = 1


async def raffle_error_handler(request: Request, exc: RaffleServiceError) -> JSONResponse:
    """FastAPI exception handler for RaffleServiceError"""
    status_code = STATUS_BY_CODE.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    log = logger.error if status_code >= 500 else logger.info
    log(
        f"{request.method} {request.url.path} failed: {exc}",
        extra={"error_code": exc.code.value, "field": exc.field, "status_code": status_code},
    )

    headers = {}
    if exc.retryable:
        headers["Retry-After"] = str(RETRY_AFTER_SECONDS)

    return JSONResponse(status_code=status_code, content=exc.to_dict(), headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body/query validation failures, reported as VALIDATION_FAILED"""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err["loc"] if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc) or None, "message": err["msg"]})

    logger.info(
        f"Validation error on {request.url.path}",
        extra={"errors": errors, "method": request.method},
    )

    first = errors[0] if errors else {"field": None, "message": "Invalid request"}
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": ErrorCode.VALIDATION_FAILED.value,
            "message": first["message"],
            "field": first["field"],
            "errors": errors,
        },
    )
