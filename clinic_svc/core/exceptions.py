"""
Shared exception classes and error handling utilities for Clinic Service API.

This module provides:
- Custom exception hierarchy for domain-specific errors
- The uniform JSON error envelope returned on every 4xx/5xx
- Exception handlers for FastAPI integration

Error envelope:
    {
        "timestamp": "2024-01-15T10:30:00.000Z",
        "status": 409,
        "error": "Conflict",
        "message": "Já existe paciente com este Cartão de Cidadão",
        "campos": {"cartaoCidadao": "..."}      # validation failures only
    }

Usage:
    from core.exceptions import PatientNotFoundError, DuplicateCivilIdError

    # In service layer - raise domain exceptions
    raise PatientNotFoundError(patient_id=42)

    # In FastAPI - register handlers via setup_exception_handlers(app)
"""
import logging
from http import HTTPStatus
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.datetime_utils import format_iso, utc_now
from schemas.validators import collect_field_errors

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "Erro de validação"


def error_body(
    status_code: int,
    message: str,
    fields: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Build the uniform error envelope."""
    body: Dict[str, Any] = {
        "timestamp": format_iso(utc_now()),
        "status": status_code,
        "error": HTTPStatus(status_code).phrase,
        "message": message,
    }
    if fields is not None:
        body["campos"] = fields
    return body


# =============================================================================
# BASE EXCEPTION CLASS
# =============================================================================

class ClinicServiceError(Exception):
    """
    Base exception for all Clinic Service domain errors.

    All custom exceptions inherit from this class. Each carries the HTTP
    status it maps to and a human-readable detail message.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "An unexpected error occurred"

    def __init__(
        self,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any
    ):
        """
        Initialize the exception.

        Args:
            detail: Human-readable error message. Uses class default if not provided.
            status_code: HTTP status code. Uses class default if not provided.
            **kwargs: Additional context, logged by the exception handler.
        """
        self.detail = detail or self.__class__.detail
        self.status_code = status_code or self.__class__.status_code
        self.context = kwargs
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the JSON error envelope."""
        return error_body(self.status_code, self.detail)


# =============================================================================
# VALIDATION EXCEPTIONS
# =============================================================================

class RequestValidationFailed(ClinicServiceError):
    """Raised when request fields fail validation before any domain logic runs."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = VALIDATION_MESSAGE

    def __init__(self, fields: Dict[str, str], **kwargs: Any):
        self.fields = fields
        super().__init__(detail=VALIDATION_MESSAGE, fields=fields, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return error_body(self.status_code, self.detail, self.fields)


class InvalidSortError(ClinicServiceError):
    """Raised when a list request asks to sort by an unknown property."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Propriedade de ordenação inválida"

    def __init__(self, sort_property: Optional[str] = None, **kwargs: Any):
        detail = (
            f"Propriedade de ordenação inválida: '{sort_property}'"
            if sort_property else self.detail
        )
        super().__init__(detail=detail, sort_property=sort_property, **kwargs)


# =============================================================================
# PATIENT EXCEPTIONS
# =============================================================================

class PatientNotFoundError(ClinicServiceError):
    """Raised when a patient is not found in the database."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Paciente não encontrado"

    def __init__(self, patient_id: Optional[int] = None, **kwargs: Any):
        detail = f"Paciente não encontrado com ID: {patient_id}" if patient_id is not None else self.detail
        super().__init__(detail=detail, patient_id=patient_id, **kwargs)


class DuplicateCivilIdError(ClinicServiceError):
    """Raised when a civil ID is already registered to another patient."""

    status_code = status.HTTP_409_CONFLICT
    detail = "Já existe paciente com este Cartão de Cidadão"

    def __init__(self, civil_id: Optional[str] = None, **kwargs: Any):
        super().__init__(civil_id=civil_id, **kwargs)


class PatientDeleteConflictError(ClinicServiceError):
    """Raised when the store refuses to remove a patient that still owns exams."""

    status_code = status.HTTP_409_CONFLICT
    detail = "Não foi possível remover o paciente: existem exames associados"

    def __init__(self, patient_id: Optional[int] = None, **kwargs: Any):
        super().__init__(patient_id=patient_id, **kwargs)


# =============================================================================
# EXAM EXCEPTIONS
# =============================================================================

class ExamNotFoundError(ClinicServiceError):
    """Raised when an exam is not found in the database."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Exame não encontrado"

    def __init__(self, exam_id: Optional[int] = None, **kwargs: Any):
        detail = f"Exame não encontrado com ID: {exam_id}" if exam_id is not None else self.detail
        super().__init__(detail=detail, exam_id=exam_id, **kwargs)


class DuplicateExamNameError(ClinicServiceError):
    """Raised when an exam name is already in use."""

    status_code = status.HTTP_409_CONFLICT
    detail = "Já existe exame com este nome"

    def __init__(self, exam_name: Optional[str] = None, **kwargs: Any):
        super().__init__(exam_name=exam_name, **kwargs)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def clinic_service_exception_handler(
    request: Request,
    exc: ClinicServiceError
) -> JSONResponse:
    """
    Handle ClinicServiceError exceptions and return the error envelope.
    """
    logger.warning(
        f"ClinicServiceError: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "context": exc.context
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Translate FastAPI request validation failures into a 400 envelope
    with one reason per invalid field.
    """
    failure = RequestValidationFailed(fields=collect_field_errors(exc.errors()))
    return await clinic_service_exception_handler(request, failure)


async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions with a generic error response.

    Logs the full exception for debugging but returns a safe error message.
    """
    logger.exception(
        f"Unhandled exception: {exc}",
        extra={
            "path": request.url.path,
            "method": request.method
        }
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Ocorreu um erro interno no servidor"
        )
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.

    Example:
        app = FastAPI()
        setup_exception_handlers(app)
    """
    app.add_exception_handler(ClinicServiceError, clinic_service_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
