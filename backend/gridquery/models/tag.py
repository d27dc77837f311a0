"""Tag ORM model and the estate/tag association table."""

from sqlalchemy import Column, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from gridquery.models.base import Base, IdMixin

estate_tags = Table(
    "estate_tags",
    Base.metadata,
    Column("estate_id", ForeignKey("estates.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(Base, IdMixin):
    """Free-form label attached to estates."""

    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(80), unique=True, nullable=False)
