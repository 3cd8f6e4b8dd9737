"""
Pydantic schemas for exam-related API operations.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.validators import MAX_ID, check_not_blank

EXAM_EXAMPLE = {
    "nome": "Hemograma Completo",
    "descricao": "Análise completa do sangue",
    "preco": 35.0,
}


class ExamUpdate(BaseModel):
    """Schema for replacing the name, description and price of an exam.

    The owning patient cannot be changed by an update.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": EXAM_EXAMPLE},
    )

    name: str = Field(
        ...,
        alias="nome",
        max_length=100,
        description="Exam name (unique across all exams)",
    )
    description: str = Field(
        ...,
        alias="descricao",
        max_length=100,
        description="What the exam consists of",
    )
    price: float = Field(
        ...,
        alias="preco",
        allow_inf_nan=False,
        description="Exam price",
    )

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return check_not_blank(value, "Nome não pode estar vazio")


class ExamCreate(ExamUpdate):
    """Schema for creating a new exam for an existing patient."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {**EXAM_EXAMPLE, "pacienteId": 1}},
    )

    patient_id: int = Field(
        ...,
        alias="pacienteId",
        le=MAX_ID,
        description="Id of the patient the exam belongs to",
    )


class ExamSummary(BaseModel):
    """Exam projection used in list results (no exam id)."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="nome", description="Exam name")
    description: str = Field(..., alias="descricao", description="Exam description")
    price: float = Field(..., alias="preco", description="Exam price")
    patient_id: int = Field(..., alias="pacienteId", description="Owning patient id")


class ExamDetail(ExamSummary):
    """Exam projection including the generated id."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"id": 1, **EXAM_EXAMPLE, "pacienteId": 1}},
    )

    id: int = Field(..., description="Unique exam identifier")
