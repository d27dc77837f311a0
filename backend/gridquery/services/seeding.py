"""Deterministic demo data for the estate domain."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from time import perf_counter

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from gridquery.models.building import Building
from gridquery.models.estate import Estate
from gridquery.models.estate_document import EstateDocument
from gridquery.models.estate_owner_assignment import EstateOwnerAssignment
from gridquery.models.partner import Partner
from gridquery.models.tag import Tag, estate_tags

logger = logging.getLogger(__name__)

Encryptor = Callable[[str], bytes]

# Fixed number texts that exercise prefix/substring search ordering.
_FIXED_NUMBER_TEXTS = {
    3: "3",
    4: "33",
    5: "1233",
    6: "0329333",
    7: "918327983213",
}


@dataclass(slots=True)
class SeedResult:
    partners: int
    buildings: int
    estates: int
    tags: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class DemoSeeder:
    """Wipes and regenerates demo rows in batches."""

    def __init__(self, db: AsyncSession, *, encryptor: Encryptor | None = None, batch_size: int = 5000) -> None:
        self.db = db
        self.encryptor = encryptor
        self.batch_size = batch_size

    async def recreate(
        self,
        *,
        estate_count: int = 100_000,
        building_count: int = 10_000,
        partner_count: int = 1_000,
        tag_count: int = 200,
    ) -> SeedResult:
        if min(building_count, partner_count) <= 0 or min(estate_count, tag_count) < 0:
            raise ValueError("Seed counts must be positive (estates and tags may be zero).")

        started = perf_counter()
        await self._reset()
        rnd = random.Random(123)

        partners = [
            Partner(status=2 if i % 20 == 0 else 0, full_name=f"Partner {i:06d}")
            for i in range(1, partner_count + 1)
        ]
        self.db.add_all(partners)
        await self.db.flush()

        buildings = [
            Building(
                status=1 if i % 30 == 0 else 0,
                partner_id=partners[rnd.randrange(len(partners))].id,
                address=f"Street {rnd.randint(1, 499)} / B{i:06d}",
            )
            for i in range(1, building_count + 1)
        ]
        self.db.add_all(buildings)
        await self.db.flush()

        tags = [Tag(name=f"Tag{i:03d}") for i in range(1, tag_count + 1)]
        self.db.add_all(tags)
        await self.db.flush()

        now = datetime.now(timezone.utc)
        for offset in range(0, estate_count, self.batch_size):
            take = min(self.batch_size, estate_count - offset)
            estates = [
                self._build_estate(rnd, offset + i + 1, buildings, tags, now)
                for i in range(take)
            ]
            self.db.add_all(estates)
            await self.db.flush()

            # Roughly 80% of estates get an active primary owner; the rest leave nulls.
            assignments = [
                EstateOwnerAssignment(
                    estate_id=estate.id,
                    partner_id=partners[rnd.randrange(len(partners))].id,
                    is_primary=True,
                    end_date=None,
                    deleted=False,
                )
                for estate in estates
                if rnd.random() < 0.8
            ]
            self.db.add_all(assignments)
            await self.db.flush()

        await self.db.commit()
        result = SeedResult(
            partners=partner_count,
            buildings=building_count,
            estates=estate_count,
            tags=tag_count,
        )
        logger.info(
            "gridquery.seed_completed partners=%d buildings=%d estates=%d tags=%d total_ms=%.2f",
            partner_count,
            building_count,
            estate_count,
            tag_count,
            (perf_counter() - started) * 1000.0,
        )
        return result

    async def _reset(self) -> None:
        for table in (
            estate_tags,
            EstateOwnerAssignment.__table__,
            EstateDocument.__table__,
            Estate.__table__,
            Building.__table__,
            Partner.__table__,
            Tag.__table__,
        ):
            await self.db.execute(delete(table))
        await self.db.flush()
        self.db.expunge_all()

    def _build_estate(
        self,
        rnd: random.Random,
        idx: int,
        buildings: list[Building],
        tags: list[Tag],
        now: datetime,
    ) -> Estate:
        comment_mode = idx % 10
        if comment_mode == 0:
            comment = None
        elif comment_mode == 1:
            comment = ""
        elif comment_mode == 2:
            comment = "   "
        else:
            comment = f"Note {idx}"

        estate = Estate(
            status=1 if idx % 25 == 0 else 0,
            building_id=buildings[rnd.randrange(len(buildings))].id,
            sqm=Decimal(str(round(20 + rnd.random() * 180, 2))),
            residents_quantity=None if idx % 7 == 0 else rnd.randint(1, 7),
            balance=None if idx % 9 == 0 else Decimal(str(round(rnd.random() * 10_000, 2))),
            comment=comment,
            non_null_text="" if idx % 11 == 0 else f"Text {idx}",
            number_text=make_number_text(rnd, idx),
            phone_numbers=[f"+995 5{rnd.randint(0, 99_999_999):08d}" for _ in range(rnd.randint(0, 2))],
            created_at=now - timedelta(days=rnd.randint(0, 364)),
            updated_at=now,
        )
        if self.encryptor is not None and idx % 3 != 0:
            estate.owner_document = self.encryptor(f"ID-{idx:08d}")
            estate.documents.append(EstateDocument(kind="deed", number_encrypted=self.encryptor(f"DEED-{idx:08d}")))
        if tags:
            for _ in range(rnd.randint(0, 3)):
                tag = tags[rnd.randrange(len(tags))]
                if tag not in estate.tags:
                    estate.tags.append(tag)
        return estate


def make_number_text(rnd: random.Random, idx: int) -> str:
    """Digit strings of assorted lengths for search-relevance ordering."""

    fixed = _FIXED_NUMBER_TEXTS.get(idx)
    if fixed is not None:
        return fixed
    mode = rnd.randint(0, 5)
    if mode == 0:
        return str(rnd.randint(0, 9))
    if mode == 1:
        return str(rnd.randint(10, 99))
    if mode == 2:
        return str(rnd.randint(1000, 9999))
    if mode == 3:
        return f"{rnd.randint(0, 999_999):07d}"
    if mode == 4:
        return str(rnd.randint(10_000_000_000, 999_999_999_998))
    return f"{rnd.randint(0, 998)}{rnd.randint(0, 9998):04d}"
