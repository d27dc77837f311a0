"""Filter mappers and the registry that resolves them by entity type."""

from gridquery.mapping.converters import to_utc_datetime
from gridquery.mapping.fields import CollectionField, FieldMap, FieldShape, IndexedField, ScalarField
from gridquery.mapping.mapper import FilterMapper, OrderChain, OrderTerm
from gridquery.mapping.registry import MapperRegistry, MapperRegistryBuilder

__all__ = [
    "CollectionField",
    "FieldMap",
    "FieldShape",
    "FilterMapper",
    "IndexedField",
    "MapperRegistry",
    "MapperRegistryBuilder",
    "OrderChain",
    "OrderTerm",
    "ScalarField",
    "to_utc_datetime",
]
