"""
Service layer for business logic.

This module contains all business logic and orchestration services.
"""
from services.patient_service import PatientService
from services.exam_service import ExamService

__all__ = [
    "PatientService",
    "ExamService",
]
