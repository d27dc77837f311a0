"""Estate owner assignment ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gridquery.models.base import Base, IdMixin
from gridquery.models.partner import Partner

if TYPE_CHECKING:
    from gridquery.models.estate import Estate


class EstateOwnerAssignment(Base, IdMixin):
    """Links a partner to an estate; the active primary owner has no end date."""

    __tablename__ = "estate_owner_assignments"
    __table_args__ = (
        Index("ix_estate_owner_assignments_active", "estate_id", "is_primary", "end_date", "deleted"),
    )

    estate_id: Mapped[int] = mapped_column(ForeignKey("estates.id", ondelete="CASCADE"), nullable=False)
    partner_id: Mapped[int] = mapped_column(ForeignKey("partners.id"), index=True, nullable=False)
    is_primary: Mapped[bool] = mapped_column(default=False, nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deleted: Mapped[bool] = mapped_column(default=False, nullable=False)

    estate: Mapped[Estate] = relationship(back_populates="owner_assignments")
    partner: Mapped[Partner] = relationship()
