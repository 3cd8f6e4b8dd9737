"""
Tests for field rules and the validation-error mapping.
"""
import pytest
from pydantic import ValidationError

from schemas import ExamCreate, PatientCreate
from schemas.validators import CIVIL_ID_MESSAGE, PHONE_MESSAGE, collect_field_errors

VALID_PATIENT = {
    "nome": "Maria Silva",
    "dataDeNascimento": "1990-01-15",
    "cartaoCidadao": "12345678",
    "telefone": "912345678",
}


def field_errors(schema, payload):
    """Validate like the request handler does: {field: reason}, empty when valid."""
    try:
        schema.model_validate(payload)
    except ValidationError as e:
        return collect_field_errors(e.errors())
    return {}


def test_valid_patient_has_no_errors():
    assert field_errors(PatientCreate, VALID_PATIENT) == {}


@pytest.mark.parametrize("civil_id", ["1234567", "123456789", "1234567a", "ABC12345"])
def test_invalid_civil_id(civil_id):
    errors = field_errors(PatientCreate, {**VALID_PATIENT, "cartaoCidadao": civil_id})
    assert errors == {"cartaoCidadao": CIVIL_ID_MESSAGE}


@pytest.mark.parametrize("phone", ["812345678", "91234567", "9123456789", "91234567x"])
def test_invalid_phone(phone):
    errors = field_errors(PatientCreate, {**VALID_PATIENT, "telefone": phone})
    assert errors == {"telefone": PHONE_MESSAGE}


def test_blank_civil_id_is_required():
    errors = field_errors(PatientCreate, {**VALID_PATIENT, "cartaoCidadao": ""})
    assert errors == {"cartaoCidadao": "Número do CC é obrigatório"}


def test_name_too_long():
    errors = field_errors(PatientCreate, {**VALID_PATIENT, "nome": "x" * 101})
    assert errors == {"nome": "Texto demasiado longo"}


def test_infinite_price_rejected():
    errors = field_errors(
        ExamCreate,
        {"nome": "A", "descricao": "B", "preco": float("inf"), "pacienteId": 1}
    )
    assert "preco" in errors


def test_collect_field_errors_keeps_first_reason():
    errors = [
        {"type": "missing", "loc": ("body", "nome"), "msg": "Field required"},
        {"type": "string_type", "loc": ("body", "nome"), "msg": "Input should be a valid string"},
    ]
    assert collect_field_errors(errors) == {"nome": "Nome é obrigatório"}


def test_collect_field_errors_query_location():
    errors = [{"type": "int_parsing", "loc": ("query", "page"), "msg": "bad"}]
    assert collect_field_errors(errors) == {"page": "Deve ser um número inteiro"}
