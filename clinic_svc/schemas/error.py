"""
Pydantic schema documenting the error envelope in the OpenAPI description.
"""
from typing import Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Uniform error body returned on every 4xx/5xx response."""
    timestamp: str = Field(..., description="ISO 8601 UTC time of the error")
    status: int = Field(..., description="HTTP status code")
    error: str = Field(..., description="HTTP reason phrase, e.g. 'Conflict'")
    message: str = Field(..., description="Human-readable description")
    campos: Optional[Dict[str, str]] = Field(
        None,
        description="Invalid field -> reason (validation failures only)",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "timestamp": "2026-01-15T10:30:00.000Z",
                "status": 400,
                "error": "Bad Request",
                "message": "Erro de validação",
                "campos": {"cartaoCidadao": "Cartão de Cidadão deve ter exatamente 8 dígitos"},
            }
        }
    }
