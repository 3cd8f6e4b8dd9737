"""
Pydantic schemas for patient-related API operations.

JSON keys keep the public API's names (nome, dataDeNascimento, cartaoCidadao,
telefone, email); Python code uses the English attribute names.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.validators import (
    check_civil_id,
    check_not_blank,
    check_phone,
)

PATIENT_EXAMPLE = {
    "nome": "Maria Silva",
    "dataDeNascimento": "1990-01-15",
    "cartaoCidadao": "12345678",
    "telefone": "912345678",
    "email": "maria@email.com",
}


class PatientCreate(BaseModel):
    """Schema for creating a new patient.

    The civil ID (Cartão de Cidadão) must not belong to any other patient.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": PATIENT_EXAMPLE},
    )

    name: str = Field(
        ...,
        alias="nome",
        max_length=100,
        description="Patient full name",
    )
    birth_date: date = Field(
        ...,
        alias="dataDeNascimento",
        description="Date of birth (ISO 8601, YYYY-MM-DD)",
    )
    civil_id: str = Field(
        ...,
        alias="cartaoCidadao",
        description="Civil ID card number, exactly 8 digits (must be unique)",
    )
    phone: str = Field(
        ...,
        alias="telefone",
        description="Phone number, 9 digits starting with 9",
    )
    email: Optional[str] = Field(
        None,
        max_length=100,
        description="E-mail address (optional, not format-checked)",
    )

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return check_not_blank(value, "Nome não pode estar vazio")

    @field_validator("civil_id")
    @classmethod
    def civil_id_format(cls, value: str) -> str:
        return check_civil_id(value)

    @field_validator("phone")
    @classmethod
    def phone_format(cls, value: str) -> str:
        return check_phone(value)


class PatientUpdate(PatientCreate):
    """Schema for replacing the mutable fields of an existing patient.

    The patient id comes from the URL and is never changed.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {**PATIENT_EXAMPLE, "telefone": "919999999"}},
    )


class PatientSummary(BaseModel):
    """Patient projection used in list results (no id)."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="nome", description="Patient full name")
    birth_date: date = Field(..., alias="dataDeNascimento", description="Date of birth")
    civil_id: str = Field(..., alias="cartaoCidadao", description="Civil ID card number")
    phone: str = Field(..., alias="telefone", description="Phone number")
    email: Optional[str] = Field(None, description="E-mail address")


class PatientDetail(PatientSummary):
    """Patient projection including the generated id."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"id": 1, **PATIENT_EXAMPLE}},
    )

    id: int = Field(..., description="Unique patient identifier")

