"""Exception handler and request logging middleware wiring for the FastAPI app."""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.errors import AccountServiceError
from app.schemas.account import ErrorResponse

logger = logging.getLogger(__name__)


def error_response(exc: AccountServiceError) -> JSONResponse:
    """Render a service error as {error, message}; 401s carry a Bearer challenge."""
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.error, message=exc.message).model_dump(),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map AccountServiceError subclasses to HTTP responses; details go to the log only."""

    @app.exception_handler(AccountServiceError)
    async def handle_account_service_error(
        request: Request, exc: AccountServiceError
    ) -> JSONResponse:
        log_extra = {
            "path": request.url.path,
            "method": request.method,
            "status_code": exc.status_code,
            "error_type": type(exc).__name__,
            "error_detail": exc.detail,
        }
        if exc.status_code >= 500:
            logger.error("Request failed", extra=log_extra)
        else:
            logger.info("Request rejected", extra=log_extra)
        return error_response(exc)


def register_request_logging(app: FastAPI) -> None:
    """Log method, path, status and latency for every request."""

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s %s %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            extra={
                "client": request.client.host if request.client else None,
            },
        )
        return response
