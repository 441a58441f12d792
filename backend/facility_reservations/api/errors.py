"""
Maps domain errors to HTTP responses. Handlers never leak internal details.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from facility_reservations.core.logging import get_logger
from facility_reservations.domain.errors import DomainError, ErrorCode

logger = get_logger(__name__)

STATUS_BY_CODE = {
    ErrorCode.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.RESERVATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ASSET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorCode.STALE_STATE: status.HTTP_409_CONFLICT,
    ErrorCode.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST)
    log = logger.warning if status_code >= 500 else logger.info
    log("domain_error", code=exc.code.value, status_code=status_code)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code.value},
        headers={"Retry-After": "5"} if status_code == status.HTTP_503_SERVICE_UNAVAILABLE else None,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
