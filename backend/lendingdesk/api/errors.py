from __future__ import annotations

import datetime
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lendingdesk.errors import LendingDeskError, ValidationError
from lendingdesk.schemas.transactions import ErrorResponse

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    error: str,
    code: str | None = None,
    details: str | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        code=code,
        details=details,
        timestamp=datetime.datetime.now(datetime.UTC).isoformat(),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def handle_lendingdesk_error(request: Request, exc: LendingDeskError) -> JSONResponse:
    logger.warning("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message, code=exc.code)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if any(tuple(error.get("loc", ()))[:1] == ("path",) for error in errors):
        logger.info("No route for %s %s", request.method, request.url.path)
        return error_response(
            status.HTTP_404_NOT_FOUND,
            f"Unknown resource: {request.url.path}",
        )

    problems = [
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in errors
    ]
    logger.warning("Rejected request %s %s: %s", request.method, request.url.path, problems)
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request",
        code=ValidationError.code,
        details="; ".join(problems) or None,
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    settings = request.app.state.settings
    details = None if settings.is_production else str(exc)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
        details=details,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LendingDeskError, handle_lendingdesk_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
