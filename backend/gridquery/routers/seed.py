"""Demo data seeding route."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from gridquery.config import Settings, get_settings
from gridquery.crypto import fernet_encryptor
from gridquery.db.dependencies import get_db
from gridquery.schemas.common import ApiResponse
from gridquery.schemas.estate import SeedRead, SeedRequest
from gridquery.services.seeding import DemoSeeder

router = APIRouter()


@router.post("/seed", response_model=ApiResponse[SeedRead])
async def seed(
    payload: SeedRequest | None = None,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[SeedRead]:
    """Drop and regenerate the demo estate data."""

    counts = payload or SeedRequest()
    encryptor = fernet_encryptor(settings.encryption_key) if settings.encryption_key else None
    seeder = DemoSeeder(db, encryptor=encryptor, batch_size=settings.seed_batch_size)
    try:
        result = await seeder.recreate(
            estate_count=counts.estates,
            building_count=counts.buildings,
            partner_count=counts.partners,
            tag_count=counts.tags,
        )
    except ValueError as exc:
        await db.rollback()
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ApiResponse(data=SeedRead(**result.to_dict()))
