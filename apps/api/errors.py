"""Mapping of business errors and request validation failures to HTTP responses."""

import logging
from datetime import datetime
from http import HTTPStatus
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.exceptions import ErrorCategory, PrivateDiningError


logger = logging.getLogger(__name__)


STATUS_BY_CATEGORY = {
    ErrorCategory.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorCategory.VALIDATION: HTTPStatus.BAD_REQUEST,
    ErrorCategory.CONFLICT: HTTPStatus.CONFLICT,
}


def error_body(
    status: HTTPStatus,
    message: str,
    path: str,
    field_errors: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "timestamp": datetime.now().isoformat(),
        "status": status.value,
        "error": status.phrase,
        "message": message,
    }
    if field_errors is not None:
        body["fieldErrors"] = field_errors
    body["path"] = path
    return body


async def private_dining_error_handler(request: Request, exc: PrivateDiningError) -> JSONResponse:
    status = STATUS_BY_CATEGORY.get(exc.category, HTTPStatus.BAD_REQUEST)
    logger.warning(f"{request.method} {request.url.path} -> {status.value}: {exc.message}")
    return JSONResponse(
        status_code=status.value,
        content=error_body(status, exc.message, request.url.path),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed ids, bad query parameters and invalid payloads are all 400."""
    field_errors: Dict[str, str] = {}
    for error in exc.errors():
        # Drop the leading "body" / "query" / "path" marker
        location = [str(part) for part in error.get("loc", ())[1:]]
        field = ".".join(location) or "request"
        field_errors.setdefault(field, error.get("msg", "Invalid value"))

    logger.warning(f"{request.method} {request.url.path} -> 400: {field_errors}")
    status = HTTPStatus.BAD_REQUEST
    return JSONResponse(
        status_code=status.value,
        content=error_body(status, "Validation failed", request.url.path, field_errors),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PrivateDiningError, private_dining_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
