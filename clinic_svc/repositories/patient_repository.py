"""
Repository for patient database operations.

This module contains all database access for patient-related operations.

Architecture:
    PatientRepository is the data access layer for patients.
    It should be injected via core.dependencies.get_patient_repository().

All SQL is encapsulated in this repository - no SQL in service or API layers.
"""
import sqlite3
import logging
from datetime import date
from typing import Any, List, Optional, Sequence

from core.datetime_utils import to_db_date
from core.exceptions import DuplicateCivilIdError, PatientDeleteConflictError
from models.page import Page, Pageable
from models.patient import Patient
from repositories.base import (
    Database,
    build_order_by,
    is_foreign_key_violation,
    is_unique_violation,
)

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, birth_date, civil_id, phone, email"

# Sort property (JSON key or attribute name) -> column
SORT_COLUMNS = {
    "id": "id",
    "nome": "name",
    "name": "name",
    "dataDeNascimento": "birth_date",
    "birthDate": "birth_date",
    "birth_date": "birth_date",
    "cartaoCidadao": "civil_id",
    "civilId": "civil_id",
    "civil_id": "civil_id",
    "telefone": "phone",
    "phone": "phone",
    "email": "email",
}


class PatientRepository:
    """
    Repository for patient CRUD operations and searches.

    This repository encapsulates all database operations for patients.
    It should be instantiated via core.dependencies.get_patient_repository().
    """

    def __init__(self, db: Database):
        """
        Initialize the patient repository.

        Args:
            db: Database instance for data access.
                Injected via core.dependencies.get_patient_repository().
        """
        self._db = db

    # =========================================================================
    # WRITES
    # =========================================================================

    def add(
        self,
        name: str,
        birth_date: date,
        civil_id: str,
        phone: str,
        email: Optional[str] = None
    ) -> Patient:
        """
        Insert a new patient and return the stored record.

        Insert and read-back happen in the same transaction.

        Returns:
            Patient: The created patient with its generated id.

        Raises:
            DuplicateCivilIdError: If the civil ID is already taken
                (UNIQUE constraint violation).
        """
        conn = self._db.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO patients (name, birth_date, civil_id, phone, email)
                VALUES (?, ?, ?, ?, ?)
            """, (name, to_db_date(birth_date), civil_id, phone, email))

            patient_id = cursor.lastrowid

            cursor.execute(
                f"SELECT {_COLUMNS} FROM patients WHERE id = ?",
                (patient_id,)
            )
            row = cursor.fetchone()

            conn.commit()
            return Patient.from_row(row)
        except sqlite3.IntegrityError as e:
            conn.rollback()
            if is_unique_violation(e):
                raise DuplicateCivilIdError(civil_id=civil_id) from e
            raise
        finally:
            conn.close()

    def update(
        self,
        patient_id: int,
        name: str,
        birth_date: date,
        civil_id: str,
        phone: str,
        email: Optional[str] = None
    ) -> Optional[Patient]:
        """
        Overwrite every mutable field of a patient.

        Returns:
            Optional[Patient]: The updated patient, or None if no patient has this id.

        Raises:
            DuplicateCivilIdError: If the new civil ID belongs to another patient.
        """
        conn = self._db.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE patients
                SET name = ?, birth_date = ?, civil_id = ?, phone = ?, email = ?
                WHERE id = ?
            """, (name, to_db_date(birth_date), civil_id, phone, email, patient_id))

            if cursor.rowcount == 0:
                conn.rollback()
                return None

            cursor.execute(
                f"SELECT {_COLUMNS} FROM patients WHERE id = ?",
                (patient_id,)
            )
            row = cursor.fetchone()

            conn.commit()
            return Patient.from_row(row)
        except sqlite3.IntegrityError as e:
            conn.rollback()
            if is_unique_violation(e):
                raise DuplicateCivilIdError(civil_id=civil_id) from e
            raise
        finally:
            conn.close()

    def delete_with_exams(self, patient_id: int) -> Optional[int]:
        """
        Delete a patient and every exam it owns in one transaction.

        BEGIN IMMEDIATE takes the write lock up front, so no exam can be
        added for the patient between the two deletes. Any failure rolls
        both deletes back.

        Returns:
            Optional[int]: Number of exams removed, or None if no patient had
                this id (nothing is changed).

        Raises:
            PatientDeleteConflictError: If the store still refuses to drop the
                patient row (foreign key from an exam).
        """
        conn = self._db.get_connection()

        try:
            conn.execute("BEGIN IMMEDIATE")
            removed_exams = conn.execute(
                "DELETE FROM exams WHERE patient_id = ?",
                (patient_id,)
            ).rowcount
            cursor = conn.execute("DELETE FROM patients WHERE id = ?", (patient_id,))

            if cursor.rowcount == 0:
                conn.rollback()
                return None

            conn.commit()
            return removed_exams
        except sqlite3.IntegrityError as e:
            conn.rollback()
            if is_foreign_key_violation(e):
                raise PatientDeleteConflictError(patient_id=patient_id) from e
            raise
        finally:
            conn.close()

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def get_by_id(self, patient_id: int) -> Optional[Patient]:
        """
        Get a patient by id.

        Returns:
            Optional[Patient]: The patient or None if not found.
        """
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM patients WHERE id = ?",
                (patient_id,)
            ).fetchone()
        finally:
            conn.close()

        return Patient.from_row(row) if row else None

    def exists_by_id(self, patient_id: int) -> bool:
        """Check whether a patient with this id exists."""
        return self._exists("id = ?", (patient_id,))

    def exists_by_civil_id(self, civil_id: str) -> bool:
        """Check (case-insensitively) whether a civil ID is already registered."""
        return self._exists("civil_id = ? COLLATE NOCASE", (civil_id,))

    def count(self) -> int:
        """Total number of patients."""
        conn = self._db.get_connection()
        try:
            return conn.execute("SELECT COUNT(*) FROM patients").fetchone()[0]
        finally:
            conn.close()

    # =========================================================================
    # SEARCHES
    # =========================================================================

    def find_all(self, pageable: Pageable) -> Page[Patient]:
        """All patients, one page at a time."""
        return self._find_page("1=1", (), pageable)

    def find_by_name(self, name: str, pageable: Pageable) -> Page[Patient]:
        """Patients whose name equals ``name``, ignoring case."""
        return self._find_page("casefold(name) = casefold(?)", (name,), pageable)

    def find_by_civil_id(self, civil_id: str, pageable: Pageable) -> Page[Patient]:
        """Patients whose civil ID equals ``civil_id``, ignoring case."""
        return self._find_page("casefold(civil_id) = casefold(?)", (civil_id,), pageable)

    def find_by_birth_date(self, birth_date: date, pageable: Pageable) -> Page[Patient]:
        """Patients born on ``birth_date``."""
        return self._find_page("birth_date = ?", (to_db_date(birth_date),), pageable)

    def find_by_name_and_civil_id(
        self,
        name: str,
        civil_id: str,
        pageable: Pageable
    ) -> Page[Patient]:
        """Patients matching both name and civil ID, ignoring case."""
        return self._find_page(
            "casefold(name) = casefold(?) AND casefold(civil_id) = casefold(?)",
            (name, civil_id),
            pageable
        )

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _exists(self, where: str, params: Sequence[Any]) -> bool:
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                f"SELECT 1 FROM patients WHERE {where} LIMIT 1",
                params
            ).fetchone()
        finally:
            conn.close()
        return row is not None

    def _find_page(self, where: str, params: Sequence[Any], pageable: Pageable) -> Page[Patient]:
        """
        Run a filtered count plus one page of the filtered rows.

        Args:
            where: SQL predicate with ? placeholders (never user text).
            params: Values bound to the placeholders.
            pageable: Page index, size and sort orders.
        """
        order_by = build_order_by(pageable, SORT_COLUMNS)

        conn = self._db.get_connection()
        try:
            total = conn.execute(
                f"SELECT COUNT(*) FROM patients WHERE {where}",
                params
            ).fetchone()[0]

            rows: List[tuple] = conn.execute(
                f"SELECT {_COLUMNS} FROM patients WHERE {where} "
                f"ORDER BY {order_by} LIMIT ? OFFSET ?",
                (*params, pageable.size, pageable.offset)
            ).fetchall()
        finally:
            conn.close()

        return Page(
            content=[Patient.from_row(row) for row in rows],
            total_elements=total,
            page=pageable.page,
            size=pageable.size,
            sort=pageable.sort,
        )
