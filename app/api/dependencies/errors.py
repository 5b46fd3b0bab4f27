"""Translate engine exceptions into JSON error responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from infrastructure.notifications.errors import (
    AdmissionRejected,
    NotificationError,
    NotificationValidationError,
)

logger = structlog.get_logger()


async def validation_error_handler(_request: Request, exc: NotificationValidationError):
    content = {"message": exc.message}
    if exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=400, content=content)


async def request_validation_error_handler(
    _request: Request, exc: RequestValidationError
):
    errors = [
        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400, content={"message": "Invalid request", "errors": errors}
    )


async def admission_rejected_handler(_request: Request, exc: AdmissionRejected):
    return JSONResponse(
        status_code=429,
        content={"message": "Too many requests", "retryAfter": exc.retry_after},
        headers={
            "Retry-After": str(exc.retry_after),
            "X-RateLimit-Limit": str(exc.limit),
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": str(int(exc.reset_at)),
        },
    )


async def notification_error_handler(request: Request, exc: Exception):
    logger.error(
        "unhandled_notification_error",
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotificationValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(AdmissionRejected, admission_rejected_handler)
    app.add_exception_handler(NotificationError, notification_error_handler)
