"""Building ORM model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gridquery.models.base import Base, IdMixin
from gridquery.models.partner import Partner

if TYPE_CHECKING:
    from gridquery.models.estate import Estate


class Building(Base, IdMixin):
    """Building that groups estates."""

    __tablename__ = "buildings"

    status: Mapped[int] = mapped_column(default=0, nullable=False)
    partner_id: Mapped[int] = mapped_column(ForeignKey("partners.id"), index=True, nullable=False)
    address: Mapped[str] = mapped_column(String(300), default="", nullable=False)

    partner: Mapped[Partner] = relationship()
    estates: Mapped[list[Estate]] = relationship(back_populates="building")
