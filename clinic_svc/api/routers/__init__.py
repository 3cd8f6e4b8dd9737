"""
API routers module.

This module contains all API route definitions organized by domain.
"""
from api.routers.health import router as health_router
from api.routers.patients import router as patients_router
from api.routers.exams import router as exams_router

__all__ = ["health_router", "patients_router", "exams_router"]
