"""Error Handlers — map exceptions raised under a route to the REST error envelope.

Invariants:
    - CrmError → its own envelope and http_status (core/errors.py)
    - RequestValidationError → 400 VALIDATION_ERROR listing each offending field
    - Anything else → 500 INTERNAL_ERROR; the message never carries exception text
    - 4xx are logged at WARNING, 5xx at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from relhub.core.errors import CrmError, ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)


def _envelope(code: str, message: str, category: ErrorCategory,
              severity: ErrorSeverity, **extra) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **extra,
        },
    }


def _field_errors(exc: RequestValidationError) -> list[dict]:
    # loc is ("body", "name") or ("query", "stage"); keep the full path
    return [
        {
            "field": ".".join(str(part) for part in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]


async def handle_crm_error(request: Request, exc: CrmError) -> JSONResponse:
    log = logger.warning if exc.http_status < 500 else logger.error
    log(
        f"{exc.code}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "contact_id": exc.context.contact_id,
            "task_id": exc.context.task_id,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_request_validation(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = _field_errors(exc)
    logger.warning(
        f"Rejected request body/query: {[d['field'] for d in details]}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
        ),
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the global handlers on the FastAPI app."""
    app.add_exception_handler(CrmError, handle_crm_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)
