"""Distinct-value listing for one mapped property, plain or encrypted."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from sqlalchemy import Select, case, func, inspect, select
from sqlalchemy.exc import CompileError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from gridquery.exceptions import MissingDecryptorError, SelectorTypeError
from gridquery.filtering import Operator, SearchTerm, build_filter_clause, find_search_term
from gridquery.mapping.fields import CollectionField, FieldMap, FieldShape, not_null_like, nullify_blank
from gridquery.mapping.registry import MapperRegistry
from gridquery.schemas.query import ColumnDistinctValueCursoredQueryModel, ColumnDistinctValueQueryModel
from gridquery.schemas.responses import CursoredResponse, PagedResponse
from gridquery.services.paging import count_rows

logger = logging.getLogger(__name__)

Decryptor = Callable[[bytes], str]

_BYTES_TYPES = (bytes, bytearray, memoryview)


async def column_distinct_values(
    db: AsyncSession,
    entity: type,
    model: ColumnDistinctValueCursoredQueryModel,
    *,
    registry: MapperRegistry,
    decryptor: Decryptor | None = None,
) -> CursoredResponse[Any]:
    """Return up to ``page_size`` distinct values of a property under a filter.

    A null-like value is reported once, as ``None``, ahead of every other
    value. Encrypted properties are never enumerated: the result is at most
    one decrypted value, or a ``None`` placeholder.
    """

    mapper = registry.get(entity)
    field, index = mapper.resolve(model.property_name)
    criteria = build_filter_clause(model.filter, mapper)

    if field.encrypted:
        data = await _encrypted_values(db, entity, field, index, criteria, decryptor)
    elif criteria is None:
        data = await _distinct_with_null_slot(db, entity, field, index, limit=model.page_size)
    else:
        stmt = _ordered_distinct(entity, field, index, criteria, find_search_term(model.filter, field.name))
        rows = (await db.scalars(stmt.limit(model.page_size))).all()
        data = _collapse_null_like(rows)

    logger.debug(
        "gridquery.distinct entity=%s property=%s encrypted=%s rows=%d",
        entity.__name__,
        field.name,
        field.encrypted,
        len(data),
    )
    return CursoredResponse(data=data, page_size=model.page_size)


async def column_distinct_values_paged(
    db: AsyncSession,
    entity: type,
    model: ColumnDistinctValueQueryModel,
    *,
    registry: MapperRegistry,
    decryptor: Decryptor | None = None,
) -> PagedResponse[Any]:
    """Page-numbered variant; encrypted properties yield a single-item page."""

    mapper = registry.get(entity)
    field, index = mapper.resolve(model.property_name)
    criteria = build_filter_clause(model.filter, mapper)

    if field.encrypted or model.encrypted:
        data = await _encrypted_values(db, entity, field, index, criteria, decryptor)
        return PagedResponse(data=data, page=1, page_size=1, total_count=len(data))

    stmt = _ordered_distinct(entity, field, index, criteria, find_search_term(model.filter, field.name))
    total_count = await count_rows(db, stmt)
    rows = (await db.scalars(stmt.offset(model.offset).limit(model.page_size))).all()
    return PagedResponse(
        data=_collapse_null_like(rows),
        page=model.page,
        page_size=model.page_size,
        total_count=total_count,
    )


# Plain columns


def _distinct_subquery(
    entity: type,
    field: FieldMap,
    index: int | None,
    criteria: ColumnElement[bool] | None,
    *,
    exclude_null_like: bool = False,
):
    projected = field.projection(entity, criteria, index).subquery()
    if exclude_null_like:
        stmt = select(projected.c.value).where(not_null_like(projected.c.value))
    else:
        # One NULL stands for every null-like variant, so it takes a single row.
        stmt = select(nullify_blank(projected.c.value).label("value"))
    return stmt.distinct().subquery()


def _ordered_distinct(
    entity: type,
    field: FieldMap,
    index: int | None,
    criteria: ColumnElement[bool] | None,
    search: SearchTerm | None,
    *,
    exclude_null_like: bool = False,
) -> Select[Any]:
    distinct = _distinct_subquery(entity, field, index, criteria, exclude_null_like=exclude_null_like)
    value = distinct.c.value
    ordering: list[ColumnElement[Any]] = []
    if not exclude_null_like:
        ordering.append(case((value.is_(None), 0), else_=1))
    # Non-string values keep plain ascending order under a search term.
    if search is not None and field.is_string:
        ordering.extend(search_relevance_order(value, search))
    ordering.append(value.asc())
    return select(value).order_by(*ordering)


def search_relevance_order(text: ColumnElement[str], search: SearchTerm) -> list[ColumnElement[Any]]:
    """Exact matches, then prefix matches, then the rest; shorter values first."""

    term = search.value
    if search.case_insensitive:
        text, term = func.lower(text), term.lower()
    if search.operator is Operator.ENDS_WITH:
        partial = text.endswith(term, autoescape=True)
    else:
        partial = text.startswith(term, autoescape=True)
    rank = case((text == term, 0), (partial, 1), else_=2)
    return [rank, func.length(text)]


async def _distinct_with_null_slot(
    db: AsyncSession,
    entity: type,
    field: FieldMap,
    index: int | None,
    *,
    limit: int,
) -> list[Any]:
    has_null = await _exists(db, entity, field.null_predicate(index))
    remaining = limit - 1 if has_null else limit
    values: list[Any] = []
    if remaining > 0:
        stmt = _ordered_distinct(entity, field, index, None, None, exclude_null_like=True)
        values = list((await db.scalars(stmt.limit(remaining))).all())
    if not has_null:
        return values
    # The sentinel always leads; drop a stray null produced by the sort.
    while values and _is_null_like(values[-1]):
        values.pop()
    return [None, *values]


def _collapse_null_like(rows: Sequence[Any]) -> list[Any]:
    values: list[Any] = []
    seen_null = False
    for value in rows:
        if _is_null_like(value):
            if seen_null:
                continue
            seen_null = True
            values.insert(0, None)
            continue
        values.append(value)
    return values


def _is_null_like(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, _BYTES_TYPES):
        return len(value) == 0
    return isinstance(value, str) and not value.strip()


async def _exists(db: AsyncSession, entity: type, *criteria: ColumnElement[bool]) -> bool:
    return bool(await db.scalar(select(select(entity).where(*criteria).exists())))


# Encrypted columns


async def _encrypted_values(
    db: AsyncSession,
    entity: type,
    field: FieldMap,
    index: int | None,
    criteria: ColumnElement[bool] | None,
    decryptor: Decryptor | None,
) -> list[Any]:
    if criteria is None:
        return [None] if await _encrypted_null_exists(db, entity, field, index) else []

    if decryptor is None:
        raise MissingDecryptorError(f"Property {field.name!r} is encrypted and no decrypt function was supplied.")

    raw = await _first_raw_value(db, entity, field, index, criteria)
    if raw is None:
        return [None]
    return [decryptor(raw)]


async def _encrypted_null_exists(db: AsyncSession, entity: type, field: FieldMap, index: int | None) -> bool:
    """Whether any row has no value; fails open for repeated values.

    A null check over a to-many projection may not translate to SQL. Rather
    than failing the request, the "no value" option is then assumed to exist.
    Only translation is guarded; errors raised by the database propagate.
    """

    try:
        stmt = select(select(entity).where(field.null_predicate(index)).exists())
        stmt.compile(dialect=db.get_bind().dialect)
    except (CompileError, NotImplementedError) as exc:
        if field.shape is not FieldShape.COLLECTION:
            raise
        logger.warning(
            "gridquery.encrypted_null_check_failed entity=%s property=%s error=%s; assuming a null value exists",
            entity.__name__,
            field.name,
            exc,
        )
        return True
    return bool(await db.scalar(stmt))


async def _first_raw_value(
    db: AsyncSession,
    entity: type,
    field: FieldMap,
    index: int | None,
    criteria: ColumnElement[bool],
) -> bytes | None:
    """Raw bytes of the first matching row, or ``None`` when empty."""

    primary_key = inspect(entity).primary_key[0]
    if not isinstance(field, CollectionField):
        stmt = field.projection(entity, criteria, index).order_by(primary_key).limit(1)
        row = (await db.execute(stmt)).first()
        return _scalar_bytes(field, None if row is None else row[0])

    first_id = await db.scalar(select(primary_key).where(criteria).order_by(primary_key).limit(1))
    if first_id is None:
        return None
    target_key = field.relationship.property.mapper.primary_key[0]
    stmt = field.projection(entity, primary_key == first_id, index).order_by(target_key)
    return _repeated_bytes(field, list((await db.scalars(stmt)).all()))


def _scalar_bytes(field: FieldMap, value: Any) -> bytes | None:
    if value is None:
        return None
    if not isinstance(value, _BYTES_TYPES):
        raise SelectorTypeError(
            f"Encrypted property {field.name!r} resolved to {type(value).__name__}, expected bytes."
        )
    raw = bytes(value)
    return raw or None


def _repeated_bytes(field: FieldMap, values: list[Any]) -> bytes | None:
    if not values:
        return None
    for value in values:
        if value is not None and not isinstance(value, _BYTES_TYPES):
            raise SelectorTypeError(
                f"Encrypted property {field.name!r} resolved to a sequence of "
                f"{type(value).__name__}, expected a sequence of bytes."
            )
    return _scalar_bytes(field, values[0])
