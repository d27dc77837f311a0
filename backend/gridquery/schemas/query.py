"""Validated request models for paged, cursored, distinct and aggregate queries."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum

from gridquery.exceptions import InvalidQueryError

MAX_PAGE_SIZE = 500
UNBOUNDED_PAGE_SIZE = sys.maxsize


def _validated_page(value: int) -> int:
    if value <= 0:
        raise InvalidQueryError("page should be a positive number.")
    return value


def _validated_page_size(value: int, *, unbounded: bool = False) -> int:
    if value <= 0:
        raise InvalidQueryError("page_size should be a positive number.")
    if value > MAX_PAGE_SIZE and not unbounded:
        return MAX_PAGE_SIZE
    return value


@dataclass(slots=True, kw_only=True)
class QueryModel:
    """Page-numbered query: filter, ordering and a page window."""

    page: int = 1
    page_size: int = 20
    filter: str | None = None
    order_by: str | None = None
    unbounded: bool = False

    def __post_init__(self) -> None:
        self.page = _validated_page(self.page)
        self.page_size = _validated_page_size(self.page_size, unbounded=self.unbounded)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def set_max_page_size(self) -> None:
        """Disable the page size cap and request every row."""

        self.unbounded = True
        self.page_size = UNBOUNDED_PAGE_SIZE


@dataclass(slots=True, kw_only=True)
class CursoredQueryModel:
    """Cursor-style query: up to ``page_size`` rows matching the live filter."""

    page_size: int = 20
    filter: str | None = None

    def __post_init__(self) -> None:
        self.page_size = _validated_page_size(self.page_size)

    def to_query_model(self) -> QueryModel:
        return QueryModel(page=1, page_size=self.page_size, filter=self.filter, order_by=None)


@dataclass(slots=True, kw_only=True)
class ColumnDistinctValueQueryModel(QueryModel):
    """Paged distinct-value listing for one mapped property."""

    property_name: str
    encrypted: bool = False


@dataclass(slots=True, kw_only=True)
class ColumnDistinctValueCursoredQueryModel:
    """Cursored distinct-value listing for one mapped property."""

    property_name: str
    page_size: int = 10
    filter: str | None = None

    def __post_init__(self) -> None:
        self.page_size = _validated_page_size(self.page_size)

    def to_query_model(self) -> QueryModel:
        return QueryModel(page=1, page_size=self.page_size, filter=self.filter, order_by=None)


class AggregateType(str, Enum):
    """Aggregate functions available over a filtered projection."""

    UNIQUE_COUNT = "unique_count"
    SUM = "sum"
    AVERAGE = "average"
    MIN = "min"
    MAX = "max"


@dataclass(slots=True, kw_only=True)
class AggregateQueryModel(ColumnDistinctValueQueryModel):
    """Aggregate one mapped property over the filtered rows."""

    aggregate_type: AggregateType
