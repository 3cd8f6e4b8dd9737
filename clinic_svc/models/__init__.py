"""
Domain models for the clinic service.

This module contains the internal domain models returned by repositories.
"""
from models.exam import Exam
from models.page import Page, Pageable, SortOrder
from models.patient import Patient

__all__ = ["Exam", "Page", "Pageable", "Patient", "SortOrder"]
