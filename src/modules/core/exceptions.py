"""Project-wide DRF exception handler.

Domain errors are translated by the views themselves.  This handler only
reshapes framework-level errors (malformed JSON, unsupported method)
into the same ``{"message": ...}`` body the views use.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


def _flatten(detail: Any) -> str:
    if isinstance(detail, dict):
        return "; ".join(f"{key}: {_flatten(value)}" for key, value in detail.items())
    if isinstance(detail, list):
        return "; ".join(_flatten(item) for item in detail)
    return str(detail)


def api_exception_handler(exc: Exception, context: dict) -> Response | None:
    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict):
        data = data.get("detail", data)
    message = _flatten(data)
    logger.warning(
        "api.request_rejected",
        status_code=response.status_code,
        error=message,
    )
    response.data = {"message": message}
    return response


def format_validation_error(exc: PydanticValidationError) -> str:
    """Render a pydantic ``ValidationError`` as a single caller-facing line."""
    parts = []
    for error in exc.errors():
        message = str(error.get("msg", "Invalid value."))
        message = message.removeprefix("Value error, ")
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)
