"""Filter mappers for the demo estate domain."""

from sqlalchemy import and_, func, select

from gridquery.mapping.converters import to_utc_datetime
from gridquery.mapping.mapper import FilterMapper
from gridquery.mapping.registry import MapperRegistryBuilder
from gridquery.models.building import Building
from gridquery.models.estate import Estate
from gridquery.models.estate_document import EstateDocument
from gridquery.models.estate_owner_assignment import EstateOwnerAssignment
from gridquery.models.partner import Partner
from gridquery.models.tag import Tag

demo_mappers = MapperRegistryBuilder()

_active_primary_owner = and_(
    EstateOwnerAssignment.estate_id == Estate.id,
    EstateOwnerAssignment.is_primary.is_(True),
    EstateOwnerAssignment.end_date.is_(None),
    EstateOwnerAssignment.deleted.is_(False),
)


@demo_mappers.register
class EstateMapper(FilterMapper[Estate]):
    entity = Estate

    def configure(self) -> None:
        self.add_map("id", Estate.id)
        self.add_map("status", Estate.status)
        self.add_map("sqm", Estate.sqm)
        self.add_map("residents_quantity", Estate.residents_quantity)
        self.add_map("balance", Estate.balance)
        self.add_map("created_at", Estate.created_at, convertor=to_utc_datetime)

        # Strings holding null, "" and whitespace-only values.
        self.add_map("comment", Estate.comment)
        self.add_map("non_null_text", Estate.non_null_text)
        self.add_map("number_text", Estate.number_text)

        self.add_map(
            "building_address",
            select(Building.address)
            .where(Building.id == Estate.building_id)
            .correlate(Estate)
            .scalar_subquery(),
        )
        # Derived scalars over a to-many navigation.
        self.add_map(
            "primary_owner_id",
            select(func.max(EstateOwnerAssignment.partner_id))
            .where(_active_primary_owner)
            .correlate(Estate)
            .scalar_subquery(),
        )
        self.add_map(
            "primary_owner_full_name",
            select(func.max(Partner.full_name))
            .select_from(EstateOwnerAssignment)
            .join(Partner, Partner.id == EstateOwnerAssignment.partner_id)
            .where(_active_primary_owner)
            .correlate(Estate)
            .scalar_subquery(),
        )

        self.add_collection_map("tag_names", Estate.tags, Tag.name)
        self.add_indexed_map("phone_numbers", lambda index: Estate.phone_numbers[index].as_string())

        self.add_map("owner_document", Estate.owner_document, encrypted=True)
        self.add_collection_map(
            "document_numbers",
            Estate.documents,
            EstateDocument.number_encrypted,
            encrypted=True,
        )

        self.add_default_order_by_descending("id")


@demo_mappers.register
class BuildingMapper(FilterMapper[Building]):
    entity = Building

    def configure(self) -> None:
        self.generate_mappings()
        self.add_map(
            "partner_name",
            select(Partner.full_name).where(Partner.id == Building.partner_id).correlate(Building).scalar_subquery(),
        )
        self.add_default_order_by("address").then_by("id")
