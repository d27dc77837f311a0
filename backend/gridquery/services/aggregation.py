"""Aggregate functions over a filtered, projected property."""

from __future__ import annotations

import logging
from collections.abc import Callable
from decimal import Decimal
from typing import Any

from sqlalchemy import Numeric, Select, cast, func, select, type_coerce
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from gridquery.exceptions import UnsupportedAggregateError
from gridquery.filtering import build_filter_clause
from gridquery.mapping.registry import MapperRegistry
from gridquery.schemas.query import AggregateQueryModel, AggregateType
from gridquery.schemas.responses import AggregateResult

logger = logging.getLogger(__name__)

# Fixed-point type used for sum and average so money-like values stay exact.
DECIMAL_TYPE = Numeric(38, 10, asdecimal=True)


def _unique_count(value: ColumnElement[Any]) -> Select[Any]:
    return select(func.count()).select_from(select(value).distinct().subquery())


def _sum(value: ColumnElement[Any]) -> Select[Any]:
    return select(type_coerce(func.sum(cast(value, DECIMAL_TYPE)), DECIMAL_TYPE))


def _average(value: ColumnElement[Any]) -> Select[Any]:
    return select(type_coerce(func.avg(cast(value, DECIMAL_TYPE)), DECIMAL_TYPE))


def _min(value: ColumnElement[Any]) -> Select[Any]:
    return select(func.min(value))


def _max(value: ColumnElement[Any]) -> Select[Any]:
    return select(func.max(value))


_AGGREGATES: dict[AggregateType, Callable[[ColumnElement[Any]], Select[Any]]] = {
    AggregateType.UNIQUE_COUNT: _unique_count,
    AggregateType.SUM: _sum,
    AggregateType.AVERAGE: _average,
    AggregateType.MIN: _min,
    AggregateType.MAX: _max,
}


async def aggregate(
    db: AsyncSession,
    entity: type,
    model: AggregateQueryModel,
    *,
    registry: MapperRegistry,
) -> AggregateResult:
    """Apply the filter, project the property and reduce it to one value."""

    try:
        kind = AggregateType(model.aggregate_type)
    except ValueError as exc:
        raise UnsupportedAggregateError(f"Aggregate {model.aggregate_type!r} is not supported.") from exc
    build = _AGGREGATES[kind]

    mapper = registry.get(entity)
    field, index = mapper.resolve(model.property_name)
    criteria = build_filter_clause(model.filter, mapper)
    projected = field.projection(entity, criteria, index).subquery()

    value = await db.scalar(build(projected.c.value))
    if kind is AggregateType.SUM:
        value = _to_decimal(value) if value is not None else Decimal(0)
    elif kind is AggregateType.AVERAGE and value is not None:
        value = _to_decimal(value)
    elif kind is AggregateType.UNIQUE_COUNT:
        value = int(value or 0)

    logger.debug(
        "gridquery.aggregate entity=%s property=%s kind=%s",
        entity.__name__,
        field.name,
        kind.value,
    )
    return AggregateResult(property_name=field.name, aggregate_type=kind, value=value)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # Drivers without a native decimal type hand back floats; go through str.
    return Decimal(str(value))
