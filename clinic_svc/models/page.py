"""
Paging primitives shared by repositories, services and routers.

Pageable describes what the caller asked for (page index, page size, sort
orders); Page carries one slice of a result set plus the total count.
"""
import math
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, List, Tuple, TypeVar

T = TypeVar("T")
R = TypeVar("R")

ASC = "ASC"
DESC = "DESC"


@dataclass(frozen=True)
class SortOrder:
    """A single sort instruction: property name and direction."""

    property: str
    direction: str = ASC


@dataclass(frozen=True)
class Pageable:
    """Zero-based page request."""

    page: int = 0
    size: int = 20
    sort: Tuple[SortOrder, ...] = ()

    @property
    def offset(self) -> int:
        return self.page * self.size

    @staticmethod
    def parse_sort(values: Iterable[str]) -> Tuple[SortOrder, ...]:
        """
        Parse "property[,property...][,asc|desc]" expressions.

        A trailing direction applies to every property in the same expression,
        so "nome,dataDeNascimento,desc" sorts both properties descending.

        Example:
            >>> Pageable.parse_sort(["nome,desc", "id"])
            (SortOrder(property='nome', direction='DESC'), SortOrder(property='id', direction='ASC'))
        """
        orders: List[SortOrder] = []
        for value in values:
            tokens = [t.strip() for t in value.split(",") if t.strip()]
            if not tokens:
                continue
            direction = ASC
            if tokens[-1].upper() in (ASC, DESC):
                direction = tokens.pop().upper()
            orders.extend(SortOrder(prop, direction) for prop in tokens)
        return tuple(orders)


@dataclass
class Page(Generic[T]):
    """One slice of a filtered result set."""

    content: List[T]
    total_elements: int
    page: int
    size: int
    sort: Tuple[SortOrder, ...] = field(default_factory=tuple)

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return math.ceil(self.total_elements / self.size)

    @property
    def is_first(self) -> bool:
        return self.page == 0

    @property
    def is_last(self) -> bool:
        return self.page + 1 >= self.total_pages

    def map(self, fn: Callable[[T], R]) -> "Page[R]":
        """Return a page with the same metadata and converted content."""
        return Page(
            content=[fn(item) for item in self.content],
            total_elements=self.total_elements,
            page=self.page,
            size=self.size,
            sort=self.sort,
        )
