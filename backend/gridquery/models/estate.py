"""Estate ORM model."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, DateTime, ForeignKey, LargeBinary, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gridquery.models.base import Base, IdMixin
from gridquery.models.building import Building
from gridquery.models.estate_document import EstateDocument
from gridquery.models.estate_owner_assignment import EstateOwnerAssignment
from gridquery.models.tag import Tag, estate_tags


class Estate(Base, IdMixin):
    """Apartment or unit inside a building."""

    __tablename__ = "estates"

    status: Mapped[int] = mapped_column(default=0, nullable=False)
    building_id: Mapped[int] = mapped_column(ForeignKey("buildings.id"), index=True, nullable=False)
    sqm: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    residents_quantity: Mapped[int | None] = mapped_column(nullable=True)
    balance: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    comment: Mapped[str | None] = mapped_column(String(500), nullable=True)
    non_null_text: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    number_text: Mapped[str | None] = mapped_column(String(32), nullable=True)
    phone_numbers: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    owner_document: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    building: Mapped[Building] = relationship(back_populates="estates")
    owner_assignments: Mapped[list[EstateOwnerAssignment]] = relationship(back_populates="estate")
    documents: Mapped[list[EstateDocument]] = relationship(back_populates="estate")
    tags: Mapped[list[Tag]] = relationship(secondary=estate_tags)
