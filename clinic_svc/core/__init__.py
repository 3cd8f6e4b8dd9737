"""
Core module for application configuration, logging, and shared error handling.

This module provides:
- Settings: Application configuration via pydantic-settings
- Exceptions: Domain-specific exception classes with HTTP status codes
- Datetime utilities: UTC-first datetime handling

Dependency providers live in core.dependencies and are imported from there
directly; they pull in repositories and services, which themselves import
from this package.
"""
from core.config import settings, Settings

from core.exceptions import (
    ClinicServiceError,
    RequestValidationFailed,
    InvalidSortError,
    PatientNotFoundError,
    DuplicateCivilIdError,
    PatientDeleteConflictError,
    ExamNotFoundError,
    DuplicateExamNameError,
    setup_exception_handlers,
)

from core.datetime_utils import (
    utc_now,
    to_utc,
    format_iso,
    to_db_date,
    parse_date,
)

__all__ = [
    # Settings
    "settings",
    "Settings",
    # Exceptions
    "ClinicServiceError",
    "RequestValidationFailed",
    "InvalidSortError",
    "PatientNotFoundError",
    "DuplicateCivilIdError",
    "PatientDeleteConflictError",
    "ExamNotFoundError",
    "DuplicateExamNameError",
    "setup_exception_handlers",
    # Datetime utilities
    "utc_now",
    "to_utc",
    "format_iso",
    "to_db_date",
    "parse_date",
]
