"""Field maps binding external names to SQLAlchemy value expressions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import LargeBinary, Select, String, and_, case, func, or_, select
from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.types import TypeEngine

from gridquery.exceptions import InvalidQueryError

Convertor = Callable[[str], Any]


class FieldShape(str, Enum):
    """Whether a field resolves to one value per row or to a repeated value."""

    SCALAR = "scalar"
    COLLECTION = "collection"


@dataclass(frozen=True, slots=True, eq=False)
class FieldMap:
    """Common metadata for every mapped field."""

    name: str
    convertor: Convertor | None = None
    encrypted: bool = False

    @property
    def shape(self) -> FieldShape:
        return FieldShape.SCALAR

    @property
    def is_array(self) -> bool:
        return self.shape is FieldShape.COLLECTION

    @property
    def is_indexed(self) -> bool:
        return False

    def value_expression(self, index: int | None = None) -> ColumnElement[Any]:
        raise NotImplementedError

    @property
    def value_type(self) -> TypeEngine[Any]:
        return self.value_expression(0 if self.is_indexed else None).type

    @property
    def is_string(self) -> bool:
        return isinstance(self.value_type, String)

    def predicate(
        self,
        build: Callable[[ColumnElement[Any]], ColumnElement[bool]],
        *,
        index: int | None = None,
        negate: bool = False,
    ) -> ColumnElement[bool]:
        """Apply ``build`` to the field value; ``negate`` inverts the match."""

        clause = build(self.value_expression(index))
        return ~clause if negate else clause

    def null_predicate(self, index: int | None = None) -> ColumnElement[bool]:
        """Row-level criterion matching rows whose value is null-like."""

        return null_like(self.value_expression(index))

    def projection(
        self,
        entity: type,
        criteria: ColumnElement[bool] | None,
        index: int | None = None,
    ) -> Select[Any]:
        """Select the field value, labelled ``value``, from the filtered rows."""

        stmt = select(self.value_expression(index).label("value")).select_from(entity)
        if criteria is not None:
            stmt = stmt.where(criteria)
        return stmt


@dataclass(frozen=True, slots=True, eq=False)
class ScalarField(FieldMap):
    """A column, or a correlated scalar subquery, evaluated per entity row."""

    expression: Any = None

    def value_expression(self, index: int | None = None) -> ColumnElement[Any]:
        if index is not None:
            raise InvalidQueryError(f"Field {self.name!r} does not support positional access.")
        return self.expression


@dataclass(frozen=True, slots=True, eq=False)
class IndexedField(FieldMap):
    """Index-aware binding; ``indexer(i)`` returns the value at position ``i``."""

    indexer: Callable[[int], ColumnElement[Any]] | None = None

    @property
    def is_indexed(self) -> bool:
        return True

    def value_expression(self, index: int | None = None) -> ColumnElement[Any]:
        if index is None:
            raise InvalidQueryError(f"Field {self.name!r} requires an index, e.g. {self.name}[0].")
        if index < 0:
            raise InvalidQueryError(f"Index for {self.name!r} should not be negative.")
        return self.indexer(index)


@dataclass(frozen=True, slots=True, eq=False)
class CollectionField(FieldMap):
    """A to-many navigation; each entity row owns zero or more ``target`` values."""

    relationship: InstrumentedAttribute[Any] | None = None
    target: Any = None

    @property
    def shape(self) -> FieldShape:
        return FieldShape.COLLECTION

    def value_expression(self, index: int | None = None) -> ColumnElement[Any]:
        if index is not None:
            raise InvalidQueryError(f"Field {self.name!r} does not support positional access.")
        return self.target

    def predicate(
        self,
        build: Callable[[ColumnElement[Any]], ColumnElement[bool]],
        *,
        index: int | None = None,
        negate: bool = False,
    ) -> ColumnElement[bool]:
        clause = self.relationship.any(build(self.value_expression(index)))
        return ~clause if negate else clause

    def null_predicate(self, index: int | None = None) -> ColumnElement[bool]:
        return ~self.relationship.any(~null_like(self.value_expression(index)))

    def projection(
        self,
        entity: type,
        criteria: ColumnElement[bool] | None,
        index: int | None = None,
    ) -> Select[Any]:
        stmt = (
            select(self.value_expression(index).label("value"))
            .select_from(entity)
            .join(self.relationship)
        )
        if criteria is not None:
            stmt = stmt.where(criteria)
        return stmt


def null_like(value: ColumnElement[Any]) -> ColumnElement[bool]:
    """SQL NULL, plus blank text and zero-length bytes."""

    if isinstance(value.type, String):
        return or_(value.is_(None), func.trim(value) == "")
    if isinstance(value.type, LargeBinary):
        return or_(value.is_(None), func.length(value) == 0)
    return value.is_(None)


def not_null_like(value: ColumnElement[Any]) -> ColumnElement[bool]:
    if isinstance(value.type, String):
        return and_(value.is_not(None), func.trim(value) != "")
    if isinstance(value.type, LargeBinary):
        return and_(value.is_not(None), func.length(value) != 0)
    return value.is_not(None)


def nullify_blank(value: ColumnElement[Any]) -> ColumnElement[Any]:
    """Map every null-like variant of ``value`` to NULL."""

    if isinstance(value.type, (String, LargeBinary)):
        return case((not_null_like(value), value))
    return value
