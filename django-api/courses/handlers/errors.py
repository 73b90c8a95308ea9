"""Mapping of domain errors to HTTP responses."""

import logging

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from courses.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_SERIES_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_RANGE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.UNSUPPORTED_RECURRENCE_TOKEN: status.HTTP_400_BAD_REQUEST,
    ErrorCode.SERIES_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SERIES_NOT_IN_PLANNED_STATE: status.HTTP_409_CONFLICT,
    ErrorCode.SERIES_ALREADY_PUBLISHED: status.HTTP_409_CONFLICT,
    ErrorCode.PREVIEW_STALE: status.HTTP_409_CONFLICT,
    ErrorCode.UNKNOWN_OCCURRENCE_KEY: status.HTTP_400_BAD_REQUEST,
    ErrorCode.LEAD_COACH_REQUIRED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_CUSTOM_SESSION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EMPTY_SCHEDULE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ACCESS_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCode.COMMIT_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def domain_error_response(error: DomainError) -> Response:
    body = {"code": error.code.value, "message": error.message}
    details = error.context()
    if details:
        body["details"] = details
    return Response({"error": body}, status=ERROR_STATUS[error.code])


def api_exception_handler(exc, context):
    """DRF exception handler that understands domain errors."""
    if isinstance(exc, DomainError):
        logger.info("Request rejected with %s", exc.code.value)
        return domain_error_response(exc)

    response = exception_handler(exc, context)
    if response is not None and isinstance(exc, ValidationError):
        response.data = {
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request",
                "details": response.data,
            }
        }
    return response
