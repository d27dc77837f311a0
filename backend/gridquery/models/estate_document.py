"""Estate document ORM model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gridquery.models.base import Base, IdMixin

if TYPE_CHECKING:
    from gridquery.models.estate import Estate


class EstateDocument(Base, IdMixin):
    """Identity document attached to an estate; the number is stored encrypted."""

    __tablename__ = "estate_documents"

    estate_id: Mapped[int] = mapped_column(ForeignKey("estates.id", ondelete="CASCADE"), index=True, nullable=False)
    kind: Mapped[str] = mapped_column(String(32), default="deed", nullable=False)
    number_encrypted: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)

    estate: Mapped[Estate] = relationship(back_populates="documents")
