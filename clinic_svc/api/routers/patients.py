"""
Patients router - patient management endpoints.

Architecture:
    HTTP Request → Router (this file) → PatientService → PatientRepository → Database

Dependency Injection:
    Services are injected via FastAPI's Depends() mechanism.
    The DI chain is defined in core/dependencies.py.
"""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from api.pagination import get_pageable
from core.dependencies import get_patient_service
from core.exceptions import PatientNotFoundError
from models import Pageable
from schemas import (
    ErrorResponse,
    PageResponse,
    PatientCreate,
    PatientDetail,
    PatientSummary,
    PatientUpdate,
)
from schemas.validators import MAX_ID
from services import PatientService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/patients",
    tags=["Patients"],
)

NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "Patient not found"}}
VALIDATION_RESPONSE = {400: {"model": ErrorResponse, "description": "Invalid request"}}
CONFLICT_RESPONSE = {409: {"model": ErrorResponse, "description": "Civil ID already registered"}}
DELETE_CONFLICT_RESPONSE = {409: {"model": ErrorResponse, "description": "Exam registered during the delete"}}


# =============================================================================
# ENDPOINTS
# =============================================================================
# Note: Services are injected via Depends(). No module-level instantiation.

@router.post(
    "",
    response_model=PatientDetail,
    status_code=status.HTTP_201_CREATED,
    responses={**VALIDATION_RESPONSE, **CONFLICT_RESPONSE},
    summary="Create a new patient",
    description="Register a patient. The civil ID (cartaoCidadao) must be unique."
)
async def create_patient(
    patient: PatientCreate,
    patient_service: PatientService = Depends(get_patient_service)
):
    """
    Create a new patient.

    - **nome**: Full name (required, max 100)
    - **dataDeNascimento**: Birth date, YYYY-MM-DD (required)
    - **cartaoCidadao**: Civil ID, exactly 8 digits (required, unique)
    - **telefone**: Mobile number, 9 digits starting with 9 (required)
    - **email**: Contact e-mail (optional, max 100)

    Raises 409 Conflict if the civil ID is already registered.
    """
    return patient_service.create_patient(patient)


@router.get(
    "",
    response_model=PageResponse[PatientSummary],
    responses=VALIDATION_RESPONSE,
    summary="List patients",
    description="Paged patient list. At most one filter is applied: name and civilId "
                "together, then name, then civilId, then birthDate."
)
async def list_patients(
    name: Optional[str] = Query(None, description="Exact name, case-insensitive"),
    birth_date: Optional[date] = Query(
        None,
        alias="birthDate",
        description="Exact birth date (YYYY-MM-DD)"
    ),
    civil_id: Optional[str] = Query(
        None,
        alias="civilId",
        description="Exact civil ID, case-insensitive"
    ),
    pageable: Pageable = Depends(get_pageable),
    patient_service: PatientService = Depends(get_patient_service)
):
    """
    Get one page of patients.

    Sorting accepts the JSON property names (nome, dataDeNascimento,
    cartaoCidadao, telefone, email) and id. Unknown properties return 400.
    """
    page = patient_service.list_patients(
        pageable,
        name=name,
        birth_date=birth_date,
        civil_id=civil_id
    )
    return PageResponse[PatientSummary].from_page(page)


@router.get(
    "/{patient_id}",
    response_model=PatientDetail,
    responses={**VALIDATION_RESPONSE, **NOT_FOUND_RESPONSE},
    summary="Get a patient",
    description="Retrieve one patient by id."
)
async def get_patient(
    patient_id: int = Path(..., le=MAX_ID, description="Patient id"),
    patient_service: PatientService = Depends(get_patient_service)
):
    patient = patient_service.get_patient(patient_id)
    if patient is None:
        raise PatientNotFoundError(patient_id=patient_id)
    return patient


@router.put(
    "/{patient_id}",
    response_model=PatientDetail,
    responses={**VALIDATION_RESPONSE, **NOT_FOUND_RESPONSE, **CONFLICT_RESPONSE},
    summary="Update a patient",
    description="Overwrite every field of an existing patient."
)
async def update_patient(
    patient: PatientUpdate,
    patient_id: int = Path(..., le=MAX_ID, description="Patient id"),
    patient_service: PatientService = Depends(get_patient_service)
):
    """
    Replace a patient's data.

    All fields are required, as on create. Returns 404 if the patient does
    not exist and 409 if the new civil ID belongs to another patient.
    """
    return patient_service.update_patient(patient_id, patient)


@router.delete(
    "/{patient_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**VALIDATION_RESPONSE, **NOT_FOUND_RESPONSE, **DELETE_CONFLICT_RESPONSE},
    summary="Delete a patient",
    description="Delete a patient together with all of their exams."
)
async def delete_patient(
    patient_id: int = Path(..., le=MAX_ID, description="Patient id"),
    patient_service: PatientService = Depends(get_patient_service)
):
    if not patient_service.delete_patient(patient_id):
        raise PatientNotFoundError(patient_id=patient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
