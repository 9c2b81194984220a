"""Map domain errors onto HTTP responses.

Protean's standard FastAPI handlers are installed first; the handlers for
validation failures, lookup misses and version conflicts are then replaced so
those responses carry ``{success, message, errors}``.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from storefront.shared.errors import flatten_messages

logger = structlog.get_logger(__name__)

CONFLICT_MESSAGE = "The order or one of its products was changed by another request. Please try again."


def _error_response(request: Request, exc: Exception, status_code: int, messages) -> JSONResponse:
    logger.info(
        "Rejected request",
        path=request.url.path,
        error_type=type(exc).__name__,
        status_code=status_code,
    )
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": flatten_messages(messages), "errors": messages},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's exception handlers with storefront response bodies."""
    register_exception_handlers(app)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return _error_response(request, exc, 400, exc.messages)

    @app.exception_handler(ObjectNotFoundError)
    async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
        messages = getattr(exc, "messages", None) or {"error": [str(exc)]}
        return _error_response(request, exc, 404, messages)

    @app.exception_handler(ExpectedVersionError)
    async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
        return _error_response(request, exc, 409, {"conflict": [CONFLICT_MESSAGE]})
