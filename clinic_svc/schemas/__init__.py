"""
Pydantic schemas for API request/response validation.

This module contains all Pydantic models used at API boundaries.
"""
from schemas.patient import PatientCreate, PatientUpdate, PatientSummary, PatientDetail
from schemas.exam import ExamCreate, ExamUpdate, ExamSummary, ExamDetail
from schemas.page import PageResponse
from schemas.error import ErrorResponse

__all__ = [
    # Patient schemas
    "PatientCreate",
    "PatientUpdate",
    "PatientSummary",
    "PatientDetail",
    # Exam schemas
    "ExamCreate",
    "ExamUpdate",
    "ExamSummary",
    "ExamDetail",
    # Shared schemas
    "PageResponse",
    "ErrorResponse",
]
