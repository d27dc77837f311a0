"""Estate list rows and seeding payloads."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class EstateListItem(BaseModel):
    """Flattened estate row with building and primary owner details."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    status: int
    sqm: Decimal
    residents_quantity: int | None = None
    balance: Decimal | None = None
    comment: str | None = None
    non_null_text: str
    number_text: str | None = None
    building_address: str | None = None
    primary_owner_id: int | None = None
    primary_owner_full_name: str | None = None


class SeedRequest(BaseModel):
    """Row counts for a demo data rebuild."""

    estates: int = Field(default=100_000, ge=0, le=1_000_000)
    buildings: int = Field(default=10_000, ge=1, le=100_000)
    partners: int = Field(default=1_000, ge=1, le=100_000)
    tags: int = Field(default=200, ge=0, le=10_000)


class SeedRead(BaseModel):
    """Row counts written by a demo data rebuild."""

    partners: int
    buildings: int
    estates: int
    tags: int
