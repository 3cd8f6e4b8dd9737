"""
Repository for exam database operations.

Architecture:
    ExamRepository is the data access layer for exams.
    It should be injected via core.dependencies.get_exam_repository().

All SQL is encapsulated in this repository - no SQL in service or API layers.
"""
import sqlite3
import logging
from typing import Any, List, Optional, Sequence

from core.exceptions import DuplicateExamNameError, PatientNotFoundError
from models.exam import Exam
from models.page import Page, Pageable
from repositories.base import (
    Database,
    build_order_by,
    is_foreign_key_violation,
    is_unique_violation,
)

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, description, price, patient_id"

SORT_COLUMNS = {
    "id": "id",
    "nome": "name",
    "name": "name",
    "descricao": "description",
    "description": "description",
    "preco": "price",
    "price": "price",
    "pacienteId": "patient_id",
    "patientId": "patient_id",
    "patient_id": "patient_id",
}


class ExamRepository:
    """
    Repository for exam CRUD operations and searches.

    It should be instantiated via core.dependencies.get_exam_repository().
    """

    def __init__(self, db: Database):
        """
        Initialize the exam repository.

        Args:
            db: Database instance for data access.
        """
        self._db = db

    def add(self, name: str, description: str, price: float, patient_id: int) -> Exam:
        """
        Insert a new exam and return the stored record.

        Raises:
            DuplicateExamNameError: If another exam already has this name.
            PatientNotFoundError: If ``patient_id`` does not reference a patient.
        """
        conn = self._db.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO exams (name, description, price, patient_id)
                VALUES (?, ?, ?, ?)
            """, (name, description, price, patient_id))

            exam_id = cursor.lastrowid

            cursor.execute(f"SELECT {_COLUMNS} FROM exams WHERE id = ?", (exam_id,))
            row = cursor.fetchone()

            conn.commit()
            return Exam.from_row(row)
        except sqlite3.IntegrityError as e:
            conn.rollback()
            if is_unique_violation(e):
                raise DuplicateExamNameError(exam_name=name) from e
            if is_foreign_key_violation(e):
                raise PatientNotFoundError(patient_id=patient_id) from e
            raise
        finally:
            conn.close()

    def update(
        self,
        exam_id: int,
        name: str,
        description: str,
        price: float
    ) -> Optional[Exam]:
        """
        Overwrite name, description and price. The owning patient is untouched.

        Returns:
            Optional[Exam]: The updated exam, or None if no exam has this id.

        Raises:
            DuplicateExamNameError: If the new name belongs to another exam.
        """
        conn = self._db.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE exams
                SET name = ?, description = ?, price = ?
                WHERE id = ?
            """, (name, description, price, exam_id))

            if cursor.rowcount == 0:
                conn.rollback()
                return None

            cursor.execute(f"SELECT {_COLUMNS} FROM exams WHERE id = ?", (exam_id,))
            row = cursor.fetchone()

            conn.commit()
            return Exam.from_row(row)
        except sqlite3.IntegrityError as e:
            conn.rollback()
            if is_unique_violation(e):
                raise DuplicateExamNameError(exam_name=name) from e
            raise
        finally:
            conn.close()

    def delete(self, exam_id: int) -> bool:
        """Delete an exam. Returns False if no exam had this id."""
        conn = self._db.get_connection()
        try:
            cursor = conn.execute("DELETE FROM exams WHERE id = ?", (exam_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def get_by_id(self, exam_id: int) -> Optional[Exam]:
        """Get an exam by id, or None if not found."""
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM exams WHERE id = ?",
                (exam_id,)
            ).fetchone()
        finally:
            conn.close()

        return Exam.from_row(row) if row else None

    def exists_by_id(self, exam_id: int) -> bool:
        return self._exists("id = ?", (exam_id,))

    def exists_by_name(self, name: str) -> bool:
        """Check whether an exam with exactly this name exists."""
        return self._exists("name = ?", (name,))

    def count(self) -> int:
        """Total number of exams."""
        conn = self._db.get_connection()
        try:
            return conn.execute("SELECT COUNT(*) FROM exams").fetchone()[0]
        finally:
            conn.close()

    def find_all(self, pageable: Pageable) -> Page[Exam]:
        return self._find_page("1=1", (), pageable)

    def find_by_name(self, name: str, pageable: Pageable) -> Page[Exam]:
        """Exams whose name equals ``name``, ignoring case."""
        return self._find_page("casefold(name) = casefold(?)", (name,), pageable)

    def find_by_description_containing(self, description: str, pageable: Pageable) -> Page[Exam]:
        """Exams whose description contains ``description``, ignoring case."""
        return self._find_page(
            "instr(casefold(description), casefold(?)) > 0",
            (description,),
            pageable
        )

    def find_by_name_and_description(
        self,
        name: str,
        description: str,
        pageable: Pageable
    ) -> Page[Exam]:
        """Exams whose name and description both match exactly, ignoring case."""
        return self._find_page(
            "casefold(name) = casefold(?) AND casefold(description) = casefold(?)",
            (name, description),
            pageable
        )

    def _exists(self, where: str, params: Sequence[Any]) -> bool:
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                f"SELECT 1 FROM exams WHERE {where} LIMIT 1",
                params
            ).fetchone()
        finally:
            conn.close()
        return row is not None

    def _find_page(self, where: str, params: Sequence[Any], pageable: Pageable) -> Page[Exam]:
        order_by = build_order_by(pageable, SORT_COLUMNS)

        conn = self._db.get_connection()
        try:
            total = conn.execute(
                f"SELECT COUNT(*) FROM exams WHERE {where}",
                params
            ).fetchone()[0]

            rows: List[tuple] = conn.execute(
                f"SELECT {_COLUMNS} FROM exams WHERE {where} "
                f"ORDER BY {order_by} LIMIT ? OFFSET ?",
                (*params, pageable.size, pageable.offset)
            ).fetchall()
        finally:
            conn.close()

        return Page(
            content=[Exam.from_row(row) for row in rows],
            total_elements=total,
            page=pageable.page,
            size=pageable.size,
            sort=pageable.sort,
        )
