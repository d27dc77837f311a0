"""Per-entity filter mapper: external field names, metadata and default ordering."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import inspect
from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.sql.elements import ColumnElement

from gridquery.exceptions import InvalidQueryError, MapperConfigurationError, MappingNotFoundError
from gridquery.mapping.fields import CollectionField, Convertor, FieldMap, IndexedField, ScalarField
from gridquery.schemas.responses import MappingRead

T = TypeVar("T")

DESC = " desc"
SEPARATOR = ", "

_INDEXED_NAME = re.compile(r"^\s*(?P<name>[^\[\]\s]+)\s*\[\s*(?P<index>-?\d+)\s*\]\s*$")


@dataclass(frozen=True, slots=True)
class OrderTerm:
    """One ``(field, direction)`` pair of an ordering."""

    field: str
    descending: bool = False

    def to_expression(self) -> str:
        return self.field + (DESC if self.descending else "")


class OrderChain:
    """Appends tie-break columns to a mapper's default ordering."""

    def __init__(self, mapper: FilterMapper[Any]) -> None:
        self._mapper = mapper

    def then_by(self, name: str) -> OrderChain:
        self._mapper._append_default_order(OrderTerm(name))
        return self

    def then_by_descending(self, name: str) -> OrderChain:
        self._mapper._append_default_order(OrderTerm(name, descending=True))
        return self


class FilterMapper(Generic[T]):
    """Binds external field names of one entity type to value expressions.

    Subclasses set ``entity`` and register their fields in ``configure``.
    Field names are matched case-insensitively. Once ``freeze`` has run, the
    mapper is read-only and any further registration raises.
    """

    entity: ClassVar[type]

    def __init__(self) -> None:
        if getattr(type(self), "entity", None) is None:
            raise MapperConfigurationError(f"{type(self).__name__} does not declare an entity type.")
        self._fields: dict[str, FieldMap] = {}
        self._default_order: list[OrderTerm] = []
        self._frozen = False
        self.configure()

    def configure(self) -> None:
        """Register fields and default ordering; overridden by subclasses."""

    # Registration

    def add_map(
        self,
        name: str,
        expression: ColumnElement[Any] | InstrumentedAttribute[Any],
        *,
        convertor: Convertor | None = None,
        encrypted: bool = False,
        override: bool = True,
    ) -> FilterMapper[T]:
        field = ScalarField(name=name, expression=expression, convertor=convertor, encrypted=encrypted)
        return self._add(field, override=override)

    def add_indexed_map(
        self,
        name: str,
        indexer: Callable[[int], ColumnElement[Any]],
        *,
        convertor: Convertor | None = None,
        encrypted: bool = False,
        override: bool = True,
    ) -> FilterMapper[T]:
        field = IndexedField(name=name, indexer=indexer, convertor=convertor, encrypted=encrypted)
        return self._add(field, override=override)

    def add_collection_map(
        self,
        name: str,
        relationship: InstrumentedAttribute[Any],
        target: ColumnElement[Any] | InstrumentedAttribute[Any],
        *,
        convertor: Convertor | None = None,
        encrypted: bool = False,
        override: bool = True,
    ) -> FilterMapper[T]:
        field = CollectionField(
            name=name,
            relationship=relationship,
            target=target,
            convertor=convertor,
            encrypted=encrypted,
        )
        return self._add(field, override=override)

    def generate_mappings(self) -> FilterMapper[T]:
        """Map every column attribute of the entity under its attribute name."""

        for attribute in inspect(self.entity).column_attrs:
            self.add_map(attribute.key, getattr(self.entity, attribute.key), override=False)
        return self

    def add_default_order_by(self, name: str) -> OrderChain:
        self._reset_default_order(OrderTerm(name))
        return OrderChain(self)

    def add_default_order_by_descending(self, name: str) -> OrderChain:
        self._reset_default_order(OrderTerm(name, descending=True))
        return OrderChain(self)

    def freeze(self) -> FilterMapper[T]:
        for term in self._default_order:
            if not self.has(term.field):
                raise MapperConfigurationError(
                    f"Default ordering of {type(self).__name__} references unknown field {term.field!r}."
                )
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # Lookup

    def get(self, name: str) -> FieldMap:
        field = self._fields.get(_key(name))
        if field is None:
            raise MappingNotFoundError(self.entity, name)
        return field

    def has(self, name: str) -> bool:
        return _key(name) in self._fields

    def resolve(self, property_name: str) -> tuple[FieldMap, int | None]:
        """Resolve ``name`` or ``name[i]`` to its field and optional position."""

        match = _INDEXED_NAME.match(property_name)
        if match is None:
            return self.get(property_name.strip()), None
        field = self.get(match.group("name"))
        if not field.is_indexed:
            raise InvalidQueryError(f"Field {field.name!r} does not support positional access.")
        return field, int(match.group("index"))

    def is_encrypted(self, name: str) -> bool:
        field = self._fields.get(_key(name))
        return field is not None and field.encrypted

    def is_array(self, name: str) -> bool:
        field = self._fields.get(_key(name))
        return field is not None and field.is_array

    def fields(self) -> Iterator[FieldMap]:
        return iter(self._fields.values())

    @property
    def default_order(self) -> tuple[OrderTerm, ...]:
        return tuple(self._default_order)

    def default_order_expression(self) -> str:
        return SEPARATOR.join(term.to_expression() for term in self._default_order)

    def describe(self) -> list[MappingRead]:
        return [
            MappingRead(
                name=field.name,
                type=_type_name(field),
                encrypted=field.encrypted,
                array=field.is_array,
            )
            for field in self._fields.values()
        ]

    # Internals

    def _add(self, field: FieldMap, *, override: bool) -> FilterMapper[T]:
        self._ensure_mutable()
        key = _key(field.name)
        if key in self._fields and not override:
            return self
        self._fields[key] = field
        return self

    def _reset_default_order(self, term: OrderTerm) -> None:
        self._ensure_mutable()
        self._default_order = [term]

    def _append_default_order(self, term: OrderTerm) -> None:
        self._ensure_mutable()
        if not self._default_order:
            raise MapperConfigurationError("then_by requires a default ordering to extend.")
        self._default_order.append(term)

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise MapperConfigurationError(f"{type(self).__name__} is frozen and cannot be changed.")


def _key(name: str) -> str:
    return name.strip().lower()


def _type_name(field: FieldMap) -> str:
    try:
        python_type = field.value_type.python_type
    except NotImplementedError:
        return type(field.value_type).__name__
    return python_type.__name__
