"""
Pydantic schemas for paginated list responses.
"""
from typing import Any, Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    """A page of results plus the metadata needed to request the next one."""
    model_config = ConfigDict(populate_by_name=True)

    content: List[T] = Field(..., description="Items on this page")
    total_elements: int = Field(..., alias="totalElements", description="Items matching the filter")
    total_pages: int = Field(..., alias="totalPages", description="Number of pages at this page size")
    number: int = Field(..., description="Zero-based page index")
    size: int = Field(..., description="Requested page size")
    number_of_elements: int = Field(..., alias="numberOfElements", description="Items on this page")
    first: bool = Field(..., description="Whether this is the first page")
    last: bool = Field(..., description="Whether this is the last page")
    empty: bool = Field(..., description="Whether this page has no items")

    @classmethod
    def from_page(cls, page: Any) -> "PageResponse[T]":
        """Build the response from a models.page.Page."""
        return cls(
            content=page.content,
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            number=page.page,
            size=page.size,
            number_of_elements=len(page.content),
            first=page.is_first,
            last=page.is_last,
            empty=not page.content,
        )
