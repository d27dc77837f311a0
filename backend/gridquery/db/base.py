"""SQLAlchemy metadata registry import for Alembic."""

from gridquery.models import Building, Estate, EstateDocument, EstateOwnerAssignment, Partner, Tag
from gridquery.models.base import Base

__all__ = ["Base", "Building", "Estate", "EstateDocument", "EstateOwnerAssignment", "Partner", "Tag"]
