"""HTTP error envelope shared by all routers.

Every error leaves the API as ``{"error": "<message>"}`` with the status the
error class declares.
"""

import json

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.errors import RequestRejected, TransactionFailed

logger = structlog.get_logger(__name__)


def first_message(exc: ValidationError) -> str:
    """Flatten a Protean validation error into its first message."""
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict) and messages:
        field, errors = next(iter(messages.items()))
        if isinstance(errors, list | tuple):
            errors = errors[0] if errors else "invalid"
        # Invariant failures are keyed by the entity, not a field
        return str(errors) if field == "_entity" else f"{field}: {errors}"
    return str(exc) or "Invalid request"


async def read_json_body(request: Request) -> dict:
    """Return the JSON object body of a request or reject it."""
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise RequestRejected("Request body must be valid JSON") from None
    if not isinstance(payload, dict):
        raise RequestRejected("Request body must be a JSON object")
    return payload


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _on_request_rejected(_request: Request, exc: RequestRejected) -> JSONResponse:
    return _error(exc.status_code, exc.message)


async def _on_validation_error(_request: Request, exc: ValidationError) -> JSONResponse:
    return _error(400, first_message(exc))


async def _on_object_not_found(_request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    logger.info("Object not found", error=str(exc))
    return _error(404, "Resource not found")


async def _on_transaction_failed(_request: Request, exc: TransactionFailed) -> JSONResponse:
    return _error(exc.status_code, exc.message)


async def _on_request_validation(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        return _error(400, "Invalid request")
    error = errors[0]
    location = [str(part) for part in error.get("loc", ()) if part != "body"]
    message = error.get("msg", "Invalid value")
    return _error(400, f"{'.'.join(location)}: {message}" if location else message)


async def _on_http_exception(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _on_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", path=request.url.path, exc_info=exc)
    return _error(500, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    """Install the ``{"error": ...}`` envelope on an application."""
    app.add_exception_handler(RequestRejected, _on_request_rejected)
    app.add_exception_handler(ValidationError, _on_validation_error)
    app.add_exception_handler(ObjectNotFoundError, _on_object_not_found)
    app.add_exception_handler(TransactionFailed, _on_transaction_failed)
    app.add_exception_handler(RequestValidationError, _on_request_validation)
    app.add_exception_handler(StarletteHTTPException, _on_http_exception)
    app.add_exception_handler(Exception, _on_unexpected)
