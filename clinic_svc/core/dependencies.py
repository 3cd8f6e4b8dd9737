"""
FastAPI Dependency Injection configuration for Clinic Service API.

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    Service Layer (Business Logic)
         ↓ constructor parameters
    Repository Layer (Data Access)
         ↓ constructor parameters
    Database (SQLite, opened in the app lifespan and kept on app.state)

There is no module-level service or database singleton: the Database lives on
the application object, and every request builds its repositories and services
from it.

Usage in Routers:
    from core.dependencies import get_patient_service

    @router.post("/patients")
    async def create_patient(
        patient: PatientCreate,
        patient_service: PatientService = Depends(get_patient_service)
    ):
        return patient_service.create_patient(patient)

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_database] = lambda: test_database
"""
import logging

from fastapi import Depends, Request

from repositories import Database, ExamRepository, PatientRepository
from services import ExamService, PatientService

logger = logging.getLogger(__name__)


# =============================================================================
# DATABASE DEPENDENCY
# =============================================================================

def get_database(request: Request) -> Database:
    """
    Get the Database opened by the application lifespan.

    Returns:
        Database: The application's database instance.
    """
    return request.app.state.database


# =============================================================================
# REPOSITORY DEPENDENCIES
# =============================================================================

def get_patient_repository(db: Database = Depends(get_database)) -> PatientRepository:
    """
    Get a PatientRepository instance with database injected.

    Returns:
        PatientRepository: Repository for patient data access.
    """
    return PatientRepository(db=db)


def get_exam_repository(db: Database = Depends(get_database)) -> ExamRepository:
    """
    Get an ExamRepository instance with database injected.

    Returns:
        ExamRepository: Repository for exam data access.
    """
    return ExamRepository(db=db)


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_patient_service(
    patient_repo: PatientRepository = Depends(get_patient_repository),
) -> PatientService:
    """
    Get a PatientService instance with its repository injected.

    Returns:
        PatientService: Service for patient business logic.
    """
    return PatientService(patient_repository=patient_repo)


def get_exam_service(
    exam_repo: ExamRepository = Depends(get_exam_repository),
    patient_repo: PatientRepository = Depends(get_patient_repository),
) -> ExamService:
    """
    Get an ExamService instance with repositories injected.

    The patient repository resolves the owning patient on create.
    """
    return ExamService(exam_repository=exam_repo, patient_repository=patient_repo)
