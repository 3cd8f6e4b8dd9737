"""
Service layer for exam operations.

Architecture:
    API Layer (routers) → ExamService → ExamRepository / PatientRepository → Database

Dependency Injection:
    ExamService receives its repositories via constructor injection.
    Use core.dependencies.get_exam_service() in routers with Depends().
"""
import logging
from typing import Optional

from core.exceptions import DuplicateExamNameError, ExamNotFoundError, PatientNotFoundError
from models import Exam, Page, Pageable
from repositories import ExamRepository, PatientRepository
from schemas import ExamCreate, ExamDetail, ExamSummary, ExamUpdate

logger = logging.getLogger(__name__)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value


def to_summary(exam: Exam) -> ExamSummary:
    """Project an exam onto the list shape (no exam id, owning patient id kept)."""
    return ExamSummary(
        name=exam.name,
        description=exam.description,
        price=exam.price,
        patient_id=exam.patient_id
    )


def to_detail(exam: Exam) -> ExamDetail:
    """Project an exam onto the detail shape (with id)."""
    return ExamDetail(
        id=exam.id,
        name=exam.name,
        description=exam.description,
        price=exam.price,
        patient_id=exam.patient_id
    )


class ExamService:
    """
    Service layer for exam operations.

    Enforces global exam-name uniqueness and that every exam belongs to an
    existing patient.
    """

    def __init__(
        self,
        exam_repository: ExamRepository,
        patient_repository: PatientRepository
    ):
        """
        Initialize the exam service.

        Args:
            exam_repository: ExamRepository instance for data access.
            patient_repository: PatientRepository used to resolve the owning patient.
        """
        self._repo = exam_repository
        self._patient_repo = patient_repository

    def create_exam(self, data: ExamCreate) -> ExamDetail:
        """
        Create an exam for an existing patient.

        Returns:
            ExamDetail: The created exam including its id and owning patient id.

        Raises:
            DuplicateExamNameError: If an exam with this name already exists,
                whichever patient owns it.
            PatientNotFoundError: If the patient id does not resolve.
        """
        logger.info(
            "Creating exam",
            extra={"exam_name": data.name, "patient_id": data.patient_id}
        )

        if self._repo.exists_by_name(data.name):
            logger.warning(f"Exam name already in use: {data.name}")
            raise DuplicateExamNameError(exam_name=data.name)

        if not self._patient_repo.exists_by_id(data.patient_id):
            logger.warning(f"Patient not found for new exam (id={data.patient_id})")
            raise PatientNotFoundError(patient_id=data.patient_id)

        exam = self._repo.add(
            name=data.name,
            description=data.description,
            price=data.price,
            patient_id=data.patient_id
        )

        logger.info(f"Exam created successfully (id={exam.id})")
        return to_detail(exam)

    def list_exams(
        self,
        pageable: Pageable,
        name: Optional[str] = None,
        description: Optional[str] = None
    ) -> Page[ExamSummary]:
        """
        List exams, applying at most one filter combination.

        Precedence: name and description together (both exact), then name
        (exact), then description (substring), then no filter. All text
        matching ignores case; blank filters count as absent.
        """
        name = _blank_to_none(name)
        description = _blank_to_none(description)

        if name is not None and description is not None:
            page = self._repo.find_by_name_and_description(name, description, pageable)
        elif name is not None:
            page = self._repo.find_by_name(name, pageable)
        elif description is not None:
            page = self._repo.find_by_description_containing(description, pageable)
        else:
            page = self._repo.find_all(pageable)

        return page.map(to_summary)

    def get_exam(self, exam_id: int) -> Optional[ExamDetail]:
        """Get an exam by id, or None if absent."""
        exam = self._repo.get_by_id(exam_id)
        return to_detail(exam) if exam else None

    def update_exam(self, exam_id: int, data: ExamUpdate) -> ExamDetail:
        """
        Overwrite the name, description and price of an exam.

        Raises:
            ExamNotFoundError: If no exam has this id.
            DuplicateExamNameError: If the new name belongs to another exam.
        """
        logger.info(f"Updating exam (id={exam_id})")

        exam = self._repo.update(
            exam_id,
            name=data.name,
            description=data.description,
            price=data.price
        )

        if exam is None:
            logger.warning(f"Exam not found for update (id={exam_id})")
            raise ExamNotFoundError(exam_id=exam_id)

        return to_detail(exam)

    def delete_exam(self, exam_id: int) -> bool:
        """
        Delete an exam.

        Returns:
            bool: True if the exam existed and was removed, False otherwise.
        """
        deleted = self._repo.delete(exam_id)
        if deleted:
            logger.info(f"Exam deleted (id={exam_id})")
        return deleted

    def count_exams(self) -> int:
        return self._repo.count()
