"""Partner ORM model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from gridquery.models.base import Base, IdMixin


class Partner(Base, IdMixin):
    """Owner or manager of buildings and estates."""

    __tablename__ = "partners"

    status: Mapped[int] = mapped_column(default=0, nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
