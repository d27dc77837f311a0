"""Paging, distinct-value, aggregate and encrypted-column helpers over SQLAlchemy."""

from gridquery.exceptions import (
    FilterSyntaxError,
    GridQueryError,
    InvalidQueryError,
    MapperConfigurationError,
    MapperNotFoundError,
    MappingNotFoundError,
    MissingDecryptorError,
    SelectorTypeError,
    UnsupportedAggregateError,
)
from gridquery.mapping import FilterMapper, MapperRegistry, MapperRegistryBuilder
from gridquery.schemas.query import (
    AggregateQueryModel,
    AggregateType,
    ColumnDistinctValueCursoredQueryModel,
    ColumnDistinctValueQueryModel,
    CursoredQueryModel,
    QueryModel,
)
from gridquery.schemas.responses import AggregateResult, CursoredResponse, MappingRead, PagedResponse
from gridquery.services.aggregation import aggregate
from gridquery.services.distinct import column_distinct_values, column_distinct_values_paged
from gridquery.services.paging import (
    apply_filter_for,
    apply_order_for,
    filter_order_and_get_cursored,
    filter_order_and_get_paged,
    get_paged,
)

__all__ = [
    "AggregateQueryModel",
    "AggregateResult",
    "AggregateType",
    "ColumnDistinctValueCursoredQueryModel",
    "ColumnDistinctValueQueryModel",
    "CursoredQueryModel",
    "CursoredResponse",
    "FilterMapper",
    "FilterSyntaxError",
    "GridQueryError",
    "InvalidQueryError",
    "MapperConfigurationError",
    "MapperNotFoundError",
    "MappingNotFoundError",
    "MappingRead",
    "MapperRegistry",
    "MapperRegistryBuilder",
    "MissingDecryptorError",
    "PagedResponse",
    "QueryModel",
    "SelectorTypeError",
    "UnsupportedAggregateError",
    "aggregate",
    "apply_filter_for",
    "apply_order_for",
    "column_distinct_values",
    "column_distinct_values_paged",
    "filter_order_and_get_cursored",
    "filter_order_and_get_paged",
    "get_paged",
]
