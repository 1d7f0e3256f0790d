import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import BusinessRuleViolation, CardServiceError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Map core failures to JSON envelopes; never leak internals on 500."""

    @app.exception_handler(CardServiceError)
    async def card_error_handler(request: Request, exc: CardServiceError):
        if isinstance(exc, BusinessRuleViolation):
            logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
        else:
            logger.warning("Storage failure on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("Validation error on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": {
                    "code": "validation_error",
                    "message": "One or more fields are invalid",
                    "retryable": False,
                    "details": {
                        ".".join(str(loc) for loc in e["loc"]): e["msg"]
                        for e in exc.errors()
                    },
                }
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "internal_error",
                    "message": "An unexpected error occurred",
                    "retryable": False,
                    "details": {},
                }
            },
        )
