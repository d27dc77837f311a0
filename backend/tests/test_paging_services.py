"""Integration tests for the paged and cursored query pipelines."""

from __future__ import annotations

import unittest
from decimal import Decimal

from sqlalchemy import select

from gridquery.exceptions import InvalidQueryError, MapperNotFoundError, MappingNotFoundError
from gridquery.models.estate import Estate
from gridquery.models.tag import Tag
from gridquery.schemas.query import CursoredQueryModel, QueryModel
from gridquery.services.paging import (
    apply_filter_for,
    apply_order_for,
    count_rows,
    filter_order_and_get_cursored,
    filter_order_and_get_paged,
    get_paged,
)

from tests.estate_fixtures import EstateDatabaseTestCase


class PagedPipelineTests(EstateDatabaseTestCase):
    async def asyncSetUp(self) -> None:
        await super().asyncSetUp()
        self.estates = await self.add_estates(
            *(
                {
                    "status": idx % 2,
                    "sqm": Decimal(100 - idx),
                    "comment": f"Note {idx:02d}",
                    "residents_quantity": idx % 5,
                }
                for idx in range(25)
            )
        )
        self.ids = [estate.id for estate in self.estates]

    async def test_default_order_and_last_page_remainder(self) -> None:
        first = await filter_order_and_get_paged(
            self.db, Estate, QueryModel(page=1, page_size=10), registry=self.registry
        )
        last = await filter_order_and_get_paged(
            self.db, Estate, QueryModel(page=3, page_size=10), registry=self.registry
        )

        self.assertEqual(first.total_count, 25)
        self.assertEqual([estate.id for estate in first.data], sorted(self.ids, reverse=True)[:10])
        self.assertEqual(last.total_count, 25)
        self.assertEqual(len(last.data), 5)
        self.assertEqual(last.page, 3)
        self.assertEqual(last.page_size, 10)

    async def test_page_past_the_end_is_empty_with_total(self) -> None:
        result = await filter_order_and_get_paged(
            self.db, Estate, QueryModel(page=9, page_size=10), registry=self.registry
        )

        self.assertEqual(result.data, [])
        self.assertEqual(result.total_count, 25)

    async def test_filter_reduces_total_count(self) -> None:
        result = await filter_order_and_get_paged(
            self.db,
            Estate,
            QueryModel(page=1, page_size=5, filter="status=1", order_by="sqm"),
            registry=self.registry,
        )

        self.assertEqual(result.total_count, 12)
        self.assertEqual(len(result.data), 5)
        sqms = [estate.sqm for estate in result.data]
        self.assertEqual(sqms, sorted(sqms))
        self.assertTrue(all(estate.status == 1 for estate in result.data))

    async def test_projection_returns_dict_rows(self) -> None:
        mapper = self.registry.get(Estate)
        projection = [
            mapper.get("id").value_expression().label("id"),
            mapper.get("building_address").value_expression().label("building_address"),
        ]
        result = await filter_order_and_get_paged(
            self.db,
            Estate,
            QueryModel(page=1, page_size=3, order_by="id"),
            registry=self.registry,
            projection=projection,
        )

        self.assertEqual(
            result.data,
            [{"id": estate_id, "building_address": "Main Street 1"} for estate_id in sorted(self.ids)[:3]],
        )

    async def test_unbounded_page_returns_everything(self) -> None:
        model = QueryModel(page=1, page_size=10)
        model.set_max_page_size()

        result = await filter_order_and_get_paged(self.db, Estate, model, registry=self.registry)

        self.assertEqual(len(result.data), 25)

    async def test_errors_surface_before_querying(self) -> None:
        with self.assertRaises(MapperNotFoundError):
            await filter_order_and_get_paged(self.db, Tag, QueryModel(), registry=self.registry)
        with self.assertRaises(MappingNotFoundError):
            await filter_order_and_get_paged(
                self.db, Estate, QueryModel(order_by="unknown"), registry=self.registry
            )
        with self.assertRaises(InvalidQueryError):
            await filter_order_and_get_paged(
                self.db, Estate, QueryModel(filter="status=x"), registry=self.registry
            )

    async def test_building_blocks_compose(self) -> None:
        model = QueryModel(page=2, page_size=4, filter="residents_quantity>=3", order_by="id")
        stmt = apply_filter_for(select(Estate.id), Estate, model, self.registry)
        stmt = apply_order_for(stmt, Estate, model, self.registry)

        self.assertEqual(await count_rows(self.db, stmt), 10)
        page = await get_paged(self.db, stmt, model)

        expected = [estate.id for estate in self.estates if estate.residents_quantity >= 3]
        self.assertEqual(page.data, expected[4:8])
        self.assertEqual(page.total_count, 10)


class CursoredPipelineTests(EstateDatabaseTestCase):
    async def asyncSetUp(self) -> None:
        await super().asyncSetUp()
        self.estates = await self.add_estates(*({"status": idx % 3} for idx in range(12)))

    async def test_walks_rows_by_narrowing_the_filter(self) -> None:
        seen: list[int] = []
        last_id: int | None = None
        while True:
            text = None if last_id is None else f"id<{last_id}"
            slice_ = await filter_order_and_get_cursored(
                self.db, Estate, CursoredQueryModel(page_size=5, filter=text), registry=self.registry
            )
            seen.extend(estate.id for estate in slice_.data)
            if len(slice_.data) < slice_.page_size:
                break
            last_id = slice_.data[-1].id

        self.assertEqual(seen, sorted((estate.id for estate in self.estates), reverse=True))

    async def test_explicit_order_and_filter(self) -> None:
        result = await filter_order_and_get_cursored(
            self.db,
            Estate,
            CursoredQueryModel(page_size=3, filter="status=0"),
            registry=self.registry,
            order_by="id",
        )

        expected = [estate.id for estate in self.estates if estate.status == 0][:3]
        self.assertEqual([estate.id for estate in result.data], expected)
        self.assertEqual(result.page_size, 3)


if __name__ == "__main__":
    unittest.main()
