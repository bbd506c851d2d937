"""
Exam Portal Exceptions

This module provides the error taxonomy shared by the services, the API
views and the exam-taking session. Every error carries an HTTP status
code and a stable error code so it can cross the API boundary and be
reconstructed on the client side.

Hierarchy:
- ExamPortalError
  - NotFound (ExamNotFound, QuestionNotFound, ResultNotFound)
  - AlreadySubmitted
  - Unauthorized
  - ValidationFailed
  - Transient

Author: Exam Portal Development Team
Version: 1.0.0
"""

import logging
from typing import Any, Dict, Optional

from rest_framework import exceptions as drf_exceptions
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ExamPortalError(Exception):
    """
    Base exception class for all examination errors.

    Attributes:
        message (str): Human-readable error message
        status_code (int): HTTP status code used when rendered by the API
        error_code (str): Stable machine-readable identifier
        details (Dict[str, Any]): Additional error details (e.g. field errors)
    """

    status_code: int = 500
    error_code: str = "error"
    default_message: str = "An unexpected error occurred."

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception
        """
        data = {
            "detail": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            data["details"] = self.details
        return data


class NotFound(ExamPortalError):
    status_code = 404
    error_code = "not_found"
    default_message = "The requested resource was not found."


class ExamNotFound(NotFound):
    error_code = "exam_not_found"
    default_message = "Exam not found."


class QuestionNotFound(NotFound):
    error_code = "question_not_found"
    default_message = "Question not found."


class ResultNotFound(NotFound):
    error_code = "result_not_found"
    default_message = "Result not found."


class AlreadySubmitted(ExamPortalError):
    """
    Raised when a result already exists for a (student, exam) pair.

    Attributes:
        result_id (Optional[int]): Id of the existing result, when known
    """

    status_code = 409
    error_code = "already_submitted"
    default_message = "You have already submitted this exam."

    def __init__(self, message: Optional[str] = None, result_id: Optional[int] = None) -> None:
        self.result_id = result_id
        details = {"result_id": result_id} if result_id is not None else None
        super().__init__(message, details=details)


class Unauthorized(ExamPortalError):
    status_code = 403
    error_code = "unauthorized"
    default_message = "You are not allowed to perform this action."


class ValidationFailed(ExamPortalError):
    status_code = 400
    error_code = "validation_failed"
    default_message = "The submitted data is invalid."


class Transient(ExamPortalError):
    """Storage or network failure without semantic meaning. Never retried automatically."""

    status_code = 503
    error_code = "transient"
    default_message = "The service is temporarily unavailable."


ERRORS_BY_CODE = {
    cls.error_code: cls
    for cls in (
        NotFound,
        ExamNotFound,
        QuestionNotFound,
        ResultNotFound,
        AlreadySubmitted,
        Unauthorized,
        ValidationFailed,
        Transient,
    )
}

# DRF's own exceptions mapped onto the same error code vocabulary
_DRF_ERROR_CODES = (
    (drf_exceptions.NotAuthenticated, Unauthorized.error_code),
    (drf_exceptions.AuthenticationFailed, Unauthorized.error_code),
    (drf_exceptions.PermissionDenied, Unauthorized.error_code),
    (drf_exceptions.NotFound, NotFound.error_code),
    (drf_exceptions.ValidationError, ValidationFailed.error_code),
)


def exam_portal_exception_handler(exc, context):
    """
    DRF exception handler rendering ExamPortalError instances.

    Errors raised by the services are turned into a response with their own
    status code. Errors raised by DRF itself are passed through the default
    handler and tagged with the matching error code.
    """
    if isinstance(exc, ExamPortalError):
        if exc.status_code >= 500:
            logger.error(f"{exc.__class__.__name__}: {exc.message}")
        return Response(exc.to_dict(), status=exc.status_code)

    response = exception_handler(exc, context)
    if response is None:
        return None

    for drf_class, error_code in _DRF_ERROR_CODES:
        if isinstance(exc, drf_class):
            if isinstance(response.data, dict) and "detail" in response.data:
                response.data["error_code"] = error_code
            else:
                response.data = {
                    "detail": "The submitted data is invalid.",
                    "error_code": error_code,
                    "details": response.data,
                }
            break
    return response
