"""Response envelopes for paged, cursored and aggregate queries."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from gridquery.schemas.query import AggregateType

T = TypeVar("T")


class PagedResponse(BaseModel, Generic[T]):
    """One page of results plus the total count of the filtered rows."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: list[T]
    page: int
    page_size: int
    total_count: int


class CursoredResponse(BaseModel, Generic[T]):
    """Up to ``page_size`` results; callers stop at the first short page."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: list[T]
    page_size: int


class MappingRead(BaseModel):
    """Externally visible field name and the value type it resolves to."""

    name: str
    type: str
    encrypted: bool = False
    array: bool = False


class AggregateResult(BaseModel):
    """Result of one aggregate function over a filtered projection."""

    property_name: str
    aggregate_type: AggregateType
    value: Any = None
