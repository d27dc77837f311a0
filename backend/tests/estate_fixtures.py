"""Shared in-memory database setup for estate query tests."""

from __future__ import annotations

import unittest
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from gridquery.mapping.estates import demo_mappers
from gridquery.models.base import Base
from gridquery.models.building import Building
from gridquery.models.estate import Estate
from gridquery.models.estate_document import EstateDocument
from gridquery.models.estate_owner_assignment import EstateOwnerAssignment
from gridquery.models.partner import Partner
from gridquery.models.tag import Tag


class EstateDatabaseTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.engine = create_async_engine(
            "sqlite+aiosqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        async with self.engine.begin() as connection:
            # Match PostgreSQL, where LIKE is case-sensitive.
            await connection.exec_driver_sql("PRAGMA case_sensitive_like = ON")
            await connection.run_sync(Base.metadata.create_all)
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False, autoflush=False)
        self.db = self.session_factory()
        self.registry = demo_mappers.build()

        self.partner = Partner(full_name="Partner A")
        self.db.add(self.partner)
        await self.db.flush()
        self.building = Building(partner_id=self.partner.id, address="Main Street 1")
        self.db.add(self.building)
        await self.db.commit()

    async def asyncTearDown(self) -> None:
        await self.db.close()
        await self.engine.dispose()

    async def add_estates(self, *rows: dict[str, Any]) -> list[Estate]:
        estates = []
        for row in rows:
            values: dict[str, Any] = {
                "building_id": self.building.id,
                "sqm": Decimal("50.00"),
                "non_null_text": "",
                "phone_numbers": [],
            }
            values.update(row)
            estates.append(Estate(**values))
        self.db.add_all(estates)
        await self.db.commit()
        return estates

    async def add_tags(self, estate: Estate, *names: str) -> list[Tag]:
        tags = [Tag(name=name) for name in names]
        self.db.add_all(tags)
        await self.db.flush()
        await self.db.refresh(estate, attribute_names=["tags"])
        estate.tags.extend(tags)
        await self.db.commit()
        return tags

    async def add_documents(self, estate: Estate, *numbers: bytes | None) -> list[EstateDocument]:
        documents = [EstateDocument(estate_id=estate.id, number_encrypted=number) for number in numbers]
        self.db.add_all(documents)
        await self.db.commit()
        return documents

    async def assign_primary_owner(self, estate: Estate, partner: Partner, **values: Any) -> EstateOwnerAssignment:
        assignment = EstateOwnerAssignment(
            estate_id=estate.id,
            partner_id=partner.id,
            is_primary=values.pop("is_primary", True),
            **values,
        )
        self.db.add(assignment)
        await self.db.commit()
        return assignment
