"""Estate query routes: paging, distinct values, aggregates and mappings."""

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from gridquery.db.dependencies import get_db
from gridquery.exceptions import GridQueryError
from gridquery.mapping.registry import MapperRegistry
from gridquery.models.estate import Estate
from gridquery.routers.dependencies import get_decryptor, get_mapper_registry, to_http_error
from gridquery.schemas.common import ApiResponse
from gridquery.schemas.estate import EstateListItem
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
from gridquery.services.distinct import Decryptor, column_distinct_values, column_distinct_values_paged
from gridquery.services.paging import filter_order_and_get_cursored, filter_order_and_get_paged

router = APIRouter(prefix="/estates")

LIST_COLUMNS = tuple(EstateListItem.model_fields)


def _list_projection(registry: MapperRegistry) -> list[Any]:
    mapper = registry.get(Estate)
    return [mapper.get(name).value_expression().label(name) for name in LIST_COLUMNS]


@router.get("/paged", response_model=PagedResponse[EstateListItem])
async def get_estates_paged(
    page: int = Query(default=1),
    page_size: int = Query(default=20),
    filter: str | None = Query(default=None),
    order_by: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    registry: MapperRegistry = Depends(get_mapper_registry),
) -> PagedResponse[EstateListItem]:
    """Filter, order and page estates with a total count."""

    try:
        model = QueryModel(page=page, page_size=page_size, filter=filter, order_by=order_by)
        result = await filter_order_and_get_paged(
            db,
            Estate,
            model,
            registry=registry,
            projection=_list_projection(registry),
        )
    except GridQueryError as exc:
        raise to_http_error(exc) from exc
    return PagedResponse[EstateListItem](
        data=[EstateListItem.model_validate(row) for row in result.data],
        page=result.page,
        page_size=result.page_size,
        total_count=result.total_count,
    )


@router.get("/cursored", response_model=CursoredResponse[EstateListItem])
async def get_estates_cursored(
    page_size: int = Query(default=20),
    filter: str | None = Query(default=None),
    order_by: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    registry: MapperRegistry = Depends(get_mapper_registry),
) -> CursoredResponse[EstateListItem]:
    """Return the next slice of estates; the caller narrows ``filter`` per slice."""

    try:
        model = CursoredQueryModel(page_size=page_size, filter=filter)
        result = await filter_order_and_get_cursored(
            db,
            Estate,
            model,
            registry=registry,
            order_by=order_by,
            projection=_list_projection(registry),
        )
    except GridQueryError as exc:
        raise to_http_error(exc) from exc
    return CursoredResponse[EstateListItem](
        data=[EstateListItem.model_validate(row) for row in result.data],
        page_size=result.page_size,
    )


@router.get("/distinct", response_model=CursoredResponse[Any])
async def get_estate_distinct_values(
    property_name: str = Query(..., min_length=1),
    page_size: int = Query(default=10),
    filter: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    registry: MapperRegistry = Depends(get_mapper_registry),
    decryptor: Decryptor | None = Depends(get_decryptor),
) -> CursoredResponse[Any]:
    """Distinct values of one estate property, null-like first."""

    try:
        model = ColumnDistinctValueCursoredQueryModel(
            property_name=property_name,
            page_size=page_size,
            filter=filter,
        )
        return await column_distinct_values(db, Estate, model, registry=registry, decryptor=decryptor)
    except GridQueryError as exc:
        raise to_http_error(exc) from exc


@router.get("/distinct/paged", response_model=PagedResponse[Any])
async def get_estate_distinct_values_paged(
    property_name: str = Query(..., min_length=1),
    page: int = Query(default=1),
    page_size: int = Query(default=20),
    filter: str | None = Query(default=None),
    encrypted: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
    registry: MapperRegistry = Depends(get_mapper_registry),
    decryptor: Decryptor | None = Depends(get_decryptor),
) -> PagedResponse[Any]:
    """Page-numbered distinct values of one estate property."""

    try:
        model = ColumnDistinctValueQueryModel(
            property_name=property_name,
            page=page,
            page_size=page_size,
            filter=filter,
            encrypted=encrypted,
        )
        return await column_distinct_values_paged(db, Estate, model, registry=registry, decryptor=decryptor)
    except GridQueryError as exc:
        raise to_http_error(exc) from exc


@router.get("/aggregate", response_model=ApiResponse[AggregateResult])
async def get_estate_aggregate(
    property_name: str = Query(..., min_length=1),
    aggregate_type: AggregateType = Query(...),
    filter: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    registry: MapperRegistry = Depends(get_mapper_registry),
) -> ApiResponse[AggregateResult]:
    """Aggregate one estate property over the filtered rows."""

    try:
        model = AggregateQueryModel(
            property_name=property_name,
            aggregate_type=aggregate_type,
            filter=filter,
        )
        return ApiResponse(data=await aggregate(db, Estate, model, registry=registry))
    except GridQueryError as exc:
        raise to_http_error(exc) from exc


@router.get("/mappings", response_model=ApiResponse[list[MappingRead]])
async def get_estate_mappings(
    registry: MapperRegistry = Depends(get_mapper_registry),
) -> ApiResponse[list[MappingRead]]:
    """List the filterable estate properties and their value types."""

    try:
        return ApiResponse(data=registry.get(Estate).describe())
    except GridQueryError as exc:
        raise to_http_error(exc) from exc
