"""
Service layer for patient operations.

This service contains business logic for patient management
and orchestrates calls to repositories.

Architecture:
    API Layer (routers) → PatientService → PatientRepository → Database

Dependency Injection:
    PatientService receives its repositories via constructor injection.
    Use core.dependencies.get_patient_service() in routers with Depends().
"""
import logging
from datetime import date
from typing import Optional

from core.exceptions import DuplicateCivilIdError, PatientNotFoundError
from models import Page, Pageable, Patient
from repositories import PatientRepository
from schemas import PatientCreate, PatientDetail, PatientSummary, PatientUpdate

logger = logging.getLogger(__name__)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value


def to_summary(patient: Patient) -> PatientSummary:
    """Project a patient onto the list shape (no id)."""
    return PatientSummary(
        name=patient.name,
        birth_date=patient.birth_date,
        civil_id=patient.civil_id,
        phone=patient.phone,
        email=patient.email
    )


def to_detail(patient: Patient) -> PatientDetail:
    """Project a patient onto the detail shape (with id)."""
    return PatientDetail(
        id=patient.id,
        name=patient.name,
        birth_date=patient.birth_date,
        civil_id=patient.civil_id,
        phone=patient.phone,
        email=patient.email
    )


class PatientService:
    """
    Service layer for patient operations.

    Handles civil ID uniqueness, existence checks, mapping between stored
    patients and API projections, and the cascading removal of a patient's
    exams.
    """

    def __init__(self, patient_repository: PatientRepository):
        """
        Initialize the patient service.

        Args:
            patient_repository: PatientRepository instance for data access.
        """
        self._repo = patient_repository

    def create_patient(self, data: PatientCreate) -> PatientDetail:
        """
        Register a new patient.

        Args:
            data: Validated patient fields.

        Returns:
            PatientDetail: The created patient, including its generated id.

        Raises:
            DuplicateCivilIdError: If the civil ID is already registered.
        """
        logger.info("Creating patient", extra={"civil_id": data.civil_id})

        if self._repo.exists_by_civil_id(data.civil_id):
            logger.warning(f"Civil ID already registered: {data.civil_id}")
            raise DuplicateCivilIdError(civil_id=data.civil_id)

        # A concurrent insert of the same civil ID is rejected by the UNIQUE
        # constraint and raised by the repository as DuplicateCivilIdError
        patient = self._repo.add(
            name=data.name,
            birth_date=data.birth_date,
            civil_id=data.civil_id,
            phone=data.phone,
            email=data.email
        )

        logger.info(f"Patient created successfully (id={patient.id})")
        return to_detail(patient)

    def list_patients(
        self,
        pageable: Pageable,
        name: Optional[str] = None,
        birth_date: Optional[date] = None,
        civil_id: Optional[str] = None
    ) -> Page[PatientSummary]:
        """
        List patients, applying at most one filter combination.

        Precedence: name and civil ID together, then name, then civil ID,
        then birth date, then no filter. Blank text filters count as absent.

        Args:
            pageable: Page index, size and sort orders.
            name: Exact name, case-insensitive (optional).
            birth_date: Exact birth date (optional).
            civil_id: Exact civil ID, case-insensitive (optional).

        Returns:
            Page of PatientSummary objects.
        """
        name = _blank_to_none(name)
        civil_id = _blank_to_none(civil_id)

        if name is not None and civil_id is not None:
            page = self._repo.find_by_name_and_civil_id(name, civil_id, pageable)
        elif name is not None:
            page = self._repo.find_by_name(name, pageable)
        elif civil_id is not None:
            page = self._repo.find_by_civil_id(civil_id, pageable)
        elif birth_date is not None:
            page = self._repo.find_by_birth_date(birth_date, pageable)
        else:
            page = self._repo.find_all(pageable)

        return page.map(to_summary)

    def get_patient(self, patient_id: int) -> Optional[PatientDetail]:
        """
        Get a patient by id.

        Returns:
            PatientDetail or None if no patient has this id. The caller decides
            how to report absence.
        """
        patient = self._repo.get_by_id(patient_id)
        return to_detail(patient) if patient else None

    def update_patient(self, patient_id: int, data: PatientUpdate) -> PatientDetail:
        """
        Overwrite every mutable field of an existing patient.

        Civil ID uniqueness is not pre-checked here; a collision with another
        patient is still rejected by the store.

        Raises:
            PatientNotFoundError: If no patient has this id.
            DuplicateCivilIdError: If the civil ID belongs to another patient.
        """
        logger.info(f"Updating patient (id={patient_id})")

        patient = self._repo.update(
            patient_id,
            name=data.name,
            birth_date=data.birth_date,
            civil_id=data.civil_id,
            phone=data.phone,
            email=data.email
        )

        if patient is None:
            logger.warning(f"Patient not found for update (id={patient_id})")
            raise PatientNotFoundError(patient_id=patient_id)

        return to_detail(patient)

    def delete_patient(self, patient_id: int) -> bool:
        """
        Delete a patient and every exam it owns.

        Both deletes run in one transaction; a failure leaves the patient
        and its exams in place.

        Returns:
            bool: True if the patient existed and was removed, False otherwise.

        Raises:
            PatientDeleteConflictError: If the store refuses to drop the patient.
        """
        removed_exams = self._repo.delete_with_exams(patient_id)
        if removed_exams is None:
            return False

        logger.info(
            f"Patient deleted (id={patient_id})",
            extra={"exams_deleted": removed_exams}
        )
        return True

    def count_patients(self) -> int:
        return self._repo.count()
