"""
Field rules and validation-error mapping for request payloads.

The pydantic schemas call the check_* functions from their field validators,
so every rule and every human-readable reason lives here. collect_field_errors()
turns pydantic's error list into the {field: reason} mapping returned in the
"campos" member of a 400 response.
"""
import re
from typing import Any, Dict, Iterable, Mapping

CIVIL_ID_PATTERN = re.compile(r"^[0-9]{8}$")
PHONE_PATTERN = re.compile(r"^9[0-9]{8}$")

CIVIL_ID_MESSAGE = "Cartão de Cidadão deve ter exatamente 8 dígitos"
PHONE_MESSAGE = "Telefone deve ter 9 dígitos começando com 9"

# Reason reported when a required field is absent or null, keyed by JSON name
REQUIRED_MESSAGES: Dict[str, str] = {
    "nome": "Nome é obrigatório",
    "dataDeNascimento": "Data de nascimento é obrigatória",
    "cartaoCidadao": "Número do CC é obrigatório",
    "telefone": "Telefone é obrigatório",
    "descricao": "Descrição é obrigatória",
    "preco": "Valor é obrigatório",
    "pacienteId": "Paciente é obrigatório",
}
DEFAULT_REQUIRED_MESSAGE = "Campo obrigatório"

# Reasons for pydantic type errors, keyed by pydantic error type
TYPE_MESSAGES: Dict[str, str] = {
    "json_invalid": "JSON inválido",
    "model_attributes_type": "Corpo do pedido deve ser um objeto JSON",
    "dict_type": "Corpo do pedido deve ser um objeto JSON",
    "string_type": "Deve ser texto",
    "string_too_long": "Texto demasiado longo",
    "date_type": "Data inválida, use o formato AAAA-MM-DD",
    "date_parsing": "Data inválida, use o formato AAAA-MM-DD",
    "date_from_datetime_parsing": "Data inválida, use o formato AAAA-MM-DD",
    "date_from_datetime_inexact": "Data inválida, use o formato AAAA-MM-DD",
    "float_type": "Deve ser um número",
    "float_parsing": "Deve ser um número",
    "finite_number": "Deve ser um número finito",
    "int_type": "Deve ser um número inteiro",
    "int_parsing": "Deve ser um número inteiro",
    "int_from_float": "Deve ser um número inteiro",
    "greater_than_equal": "Valor abaixo do mínimo permitido",
    "less_than_equal": "Valor acima do máximo permitido",
}

# Largest value a SQLite INTEGER column holds
MAX_ID = 2**63 - 1

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


# =============================================================================
# FIELD RULES
# =============================================================================

def check_not_blank(value: str, message: str) -> str:
    """Reject empty or whitespace-only text."""
    if not value or not value.strip():
        raise ValueError(message)
    return value


def check_civil_id(value: str) -> str:
    """Civil ID must be exactly 8 decimal digits."""
    if not value or not value.strip():
        raise ValueError(REQUIRED_MESSAGES["cartaoCidadao"])
    if not CIVIL_ID_PATTERN.match(value):
        raise ValueError(CIVIL_ID_MESSAGE)
    return value


def check_phone(value: str) -> str:
    """Phone must be 9 digits starting with 9."""
    if not value or not value.strip():
        raise ValueError(REQUIRED_MESSAGES["telefone"])
    if not PHONE_PATTERN.match(value):
        raise ValueError(PHONE_MESSAGE)
    return value


# =============================================================================
# ERROR MAPPING
# =============================================================================

def _field_name(loc: Iterable[Any]) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    # Positions inside an invalid JSON document are not field names
    parts = [p for p in parts if not p.isdigit()]
    return parts[-1] if parts else "body"


def _reason(error: Mapping[str, Any], field: str) -> str:
    error_type = error.get("type", "")
    is_null = "input" in error and error["input"] is None

    if error_type == "missing" or (is_null and error_type.endswith("_type")):
        return REQUIRED_MESSAGES.get(field, DEFAULT_REQUIRED_MESSAGE)

    if error_type == "value_error":
        ctx = error.get("ctx") or {}
        if "error" in ctx:
            return str(ctx["error"])

    return TYPE_MESSAGES.get(error_type, error.get("msg", "Valor inválido"))


def collect_field_errors(errors: Iterable[Mapping[str, Any]]) -> Dict[str, str]:
    """
    Map pydantic/FastAPI validation errors to {field: reason}.

    Only the first reason per field is kept.
    """
    fields: Dict[str, str] = {}
    for error in errors:
        field = _field_name(error.get("loc", ()))
        fields.setdefault(field, _reason(error, field))
    return fields

