"""
Domain model for exams.
"""
from dataclasses import dataclass


@dataclass
class Exam:
    """Model representing a medical exam owned by a patient."""

    id: int
    name: str
    description: str
    price: float
    patient_id: int

    @classmethod
    def from_row(cls, row: tuple) -> 'Exam':
        """Create an Exam from a (id, name, description, price, patient_id) row."""
        return cls(
            id=row[0],
            name=row[1],
            description=row[2],
            price=row[3],
            patient_id=row[4]
        )
