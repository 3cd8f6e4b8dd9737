"""
Page request query parameters shared by the list endpoints.

    GET /patients?page=0&size=20&sort=nome,desc&sort=id
"""
from typing import List

from fastapi import Query

from core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from models import Pageable
from schemas.validators import MAX_ID

# Highest page index whose row offset still fits a SQLite INTEGER
MAX_PAGE = MAX_ID // MAX_PAGE_SIZE


def get_pageable(
    page: int = Query(0, ge=0, le=MAX_PAGE, description="Zero-based page index"),
    size: int = Query(
        DEFAULT_PAGE_SIZE,
        ge=1,
        le=MAX_PAGE_SIZE,
        description=f"Page size (max {MAX_PAGE_SIZE})"
    ),
    sort: List[str] = Query(
        [],
        description="Sort expression 'property[,property][,asc|desc]'. Repeatable."
    ),
) -> Pageable:
    """Build a Pageable from the page, size and sort query parameters."""
    return Pageable(page=page, size=size, sort=Pageable.parse_sort(sort))
