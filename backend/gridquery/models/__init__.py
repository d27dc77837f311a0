"""ORM models package exports."""

from gridquery.models.building import Building
from gridquery.models.estate import Estate
from gridquery.models.estate_document import EstateDocument
from gridquery.models.estate_owner_assignment import EstateOwnerAssignment
from gridquery.models.partner import Partner
from gridquery.models.tag import Tag, estate_tags

__all__ = [
    "Building",
    "Estate",
    "EstateDocument",
    "EstateOwnerAssignment",
    "Partner",
    "Tag",
    "estate_tags",
]
