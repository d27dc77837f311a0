"""Filter, order and page pipeline over mapped entities."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from gridquery.filtering import apply_filter, apply_order
from gridquery.mapping.registry import MapperRegistry
from gridquery.schemas.query import CursoredQueryModel, QueryModel
from gridquery.schemas.responses import CursoredResponse, PagedResponse

logger = logging.getLogger(__name__)

Projection = Sequence[ColumnElement[Any]]


async def filter_order_and_get_paged(
    db: AsyncSession,
    entity: type,
    model: QueryModel,
    *,
    registry: MapperRegistry,
    projection: Projection | None = None,
) -> PagedResponse[Any]:
    """Return one page of filtered, ordered rows and the filtered row count.

    Without ``projection`` the page holds ORM instances; otherwise each row is
    a dict keyed by the projection labels.
    """

    mapper = registry.get(entity)
    order_by = model.order_by if model.order_by is not None else mapper.default_order_expression()

    filtered = apply_filter(select(entity), model.filter, mapper)
    total_count = await count_rows(db, filtered)

    stmt = apply_order(filtered, order_by, mapper)
    stmt = _project(stmt, projection).offset(model.offset).limit(model.page_size)
    data = await _fetch(db, stmt, projection)

    logger.debug(
        "gridquery.paged entity=%s page=%d page_size=%d rows=%d total=%d",
        entity.__name__,
        model.page,
        model.page_size,
        len(data),
        total_count,
    )
    return PagedResponse(data=data, page=model.page, page_size=model.page_size, total_count=total_count)


async def filter_order_and_get_cursored(
    db: AsyncSession,
    entity: type,
    model: CursoredQueryModel,
    *,
    registry: MapperRegistry,
    order_by: str | None = None,
    projection: Projection | None = None,
) -> CursoredResponse[Any]:
    """Return up to ``page_size`` filtered rows, without a running count."""

    mapper = registry.get(entity)
    query = model.to_query_model()
    ordering = order_by if order_by is not None else mapper.default_order_expression()

    stmt = apply_order(apply_filter(select(entity), query.filter, mapper), ordering, mapper)
    stmt = _project(stmt, projection).limit(query.page_size)
    data = await _fetch(db, stmt, projection)

    logger.debug(
        "gridquery.cursored entity=%s page_size=%d rows=%d",
        entity.__name__,
        query.page_size,
        len(data),
    )
    return CursoredResponse(data=data, page_size=query.page_size)


async def get_paged(db: AsyncSession, statement: Select[Any], model: QueryModel) -> PagedResponse[Any]:
    """Count and page an already shaped single-column or entity statement."""

    total_count = await count_rows(db, statement)
    result = await db.scalars(statement.offset(model.offset).limit(model.page_size))
    return PagedResponse(
        data=list(result.all()),
        page=model.page,
        page_size=model.page_size,
        total_count=total_count,
    )


def apply_filter_for(statement: Select[Any], entity: type, model: QueryModel, registry: MapperRegistry) -> Select[Any]:
    return apply_filter(statement, model.filter, registry.get(entity))


def apply_order_for(statement: Select[Any], entity: type, model: QueryModel, registry: MapperRegistry) -> Select[Any]:
    mapper = registry.get(entity)
    order_by = model.order_by if model.order_by is not None else mapper.default_order_expression()
    return apply_order(statement, order_by, mapper)


async def count_rows(db: AsyncSession, statement: Select[Any]) -> int:
    """Count the rows ``statement`` would return, ignoring any ordering."""

    counted = select(func.count()).select_from(statement.order_by(None).subquery())
    return int(await db.scalar(counted) or 0)


def _project(statement: Select[Any], projection: Projection | None) -> Select[Any]:
    if projection is None:
        return statement
    return statement.with_only_columns(*projection, maintain_column_froms=True)


async def _fetch(db: AsyncSession, statement: Select[Any], projection: Projection | None) -> list[Any]:
    if projection is None:
        result = await db.scalars(statement)
        return list(result.all())
    result = await db.execute(statement)
    return [dict(row._mapping) for row in result.all()]
