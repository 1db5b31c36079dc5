"""Translate service exceptions into HTTP errors with a stable error envelope."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from naybourhood.core.exceptions import DatabaseError, NaybourhoodException, NotFoundError, ValidationError
from naybourhood.schemas.common import ErrorEnvelope

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[NaybourhoodException], int, str], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST, "validation_error"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (DatabaseError, status.HTTP_500_INTERNAL_SERVER_ERROR, "database_error"),
)


def to_http_exception(exc: NaybourhoodException) -> HTTPException:
    for error_type, status_code, error_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            break
    else:
        status_code, error_code = status.HTTP_500_INTERNAL_SERVER_ERROR, "service_error"

    if status_code >= 500:
        logger.error("api.request_failed", extra={"event": "api.request_failed", "error_code": error_code, "error": str(exc)})
    envelope = ErrorEnvelope(error_code=error_code, detail=str(exc))
    return HTTPException(status_code=status_code, detail=envelope.model_dump())
