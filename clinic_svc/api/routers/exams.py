"""
Exams router - exam management endpoints.

Architecture:
    HTTP Request → Router (this file) → ExamService → ExamRepository → Database

Every exam belongs to exactly one patient, referenced by pacienteId on
create. Exam names are unique across the whole clinic.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from api.pagination import get_pageable
from core.dependencies import get_exam_service
from core.exceptions import ExamNotFoundError
from models import Pageable
from schemas import (
    ErrorResponse,
    ExamCreate,
    ExamDetail,
    ExamSummary,
    ExamUpdate,
    PageResponse,
)
from schemas.validators import MAX_ID
from services import ExamService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/exams",
    tags=["Exams"],
)

NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "Exam or patient not found"}}
VALIDATION_RESPONSE = {400: {"model": ErrorResponse, "description": "Invalid request"}}
CONFLICT_RESPONSE = {409: {"model": ErrorResponse, "description": "Exam name already in use"}}


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post(
    "",
    response_model=ExamDetail,
    status_code=status.HTTP_201_CREATED,
    responses={**VALIDATION_RESPONSE, **NOT_FOUND_RESPONSE, **CONFLICT_RESPONSE},
    summary="Create a new exam",
    description="Register an exam for an existing patient. Exam names must be unique."
)
async def create_exam(
    exam: ExamCreate,
    exam_service: ExamService = Depends(get_exam_service)
):
    """
    Create a new exam.

    - **nome**: Exam name (required, unique, max 100)
    - **descricao**: Description (required, max 100)
    - **preco**: Price (required)
    - **pacienteId**: Owning patient id (required)

    Raises 409 Conflict if the name is taken and 404 if the patient does not exist.
    """
    return exam_service.create_exam(exam)


@router.get(
    "",
    response_model=PageResponse[ExamSummary],
    responses=VALIDATION_RESPONSE,
    summary="List exams",
    description="Paged exam list. At most one filter is applied: name and description "
                "together, then name, then description (substring)."
)
async def list_exams(
    name: Optional[str] = Query(None, description="Exact name, case-insensitive"),
    description: Optional[str] = Query(
        None,
        description="Substring of the description, case-insensitive"
    ),
    pageable: Pageable = Depends(get_pageable),
    exam_service: ExamService = Depends(get_exam_service)
):
    page = exam_service.list_exams(pageable, name=name, description=description)
    return PageResponse[ExamSummary].from_page(page)


@router.get(
    "/{exam_id}",
    response_model=ExamDetail,
    responses={**VALIDATION_RESPONSE, **NOT_FOUND_RESPONSE},
    summary="Get an exam",
    description="Retrieve one exam by id."
)
async def get_exam(
    exam_id: int = Path(..., le=MAX_ID, description="Exam id"),
    exam_service: ExamService = Depends(get_exam_service)
):
    exam = exam_service.get_exam(exam_id)
    if exam is None:
        raise ExamNotFoundError(exam_id=exam_id)
    return exam


@router.put(
    "/{exam_id}",
    response_model=ExamDetail,
    responses={**VALIDATION_RESPONSE, **NOT_FOUND_RESPONSE, **CONFLICT_RESPONSE},
    summary="Update an exam",
    description="Overwrite the name, description and price of an exam. "
                "The owning patient cannot be changed."
)
async def update_exam(
    exam: ExamUpdate,
    exam_id: int = Path(..., le=MAX_ID, description="Exam id"),
    exam_service: ExamService = Depends(get_exam_service)
):
    return exam_service.update_exam(exam_id, exam)


@router.delete(
    "/{exam_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**VALIDATION_RESPONSE, **NOT_FOUND_RESPONSE},
    summary="Delete an exam"
)
async def delete_exam(
    exam_id: int = Path(..., le=MAX_ID, description="Exam id"),
    exam_service: ExamService = Depends(get_exam_service)
):
    if not exam_service.delete_exam(exam_id):
        raise ExamNotFoundError(exam_id=exam_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
