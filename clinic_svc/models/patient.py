"""
Domain model for patients.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.datetime_utils import parse_date


@dataclass
class Patient:
    """Model representing a patient in the system."""

    id: int
    name: str
    birth_date: date
    civil_id: str
    phone: str
    email: Optional[str] = None

    @classmethod
    def from_row(cls, row: tuple) -> 'Patient':
        """
        Create a Patient from a database row tuple.

        Args:
            row: Tuple of (id, name, birth_date, civil_id, phone, email).

        Returns:
            Patient instance.
        """
        return cls(
            id=row[0],
            name=row[1],
            birth_date=parse_date(row[2]),
            civil_id=row[3],
            phone=row[4],
            email=row[5]
        )
