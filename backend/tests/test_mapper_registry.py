"""Unit tests for filter mappers and the mapper registry."""

import unittest

from gridquery.exceptions import (
    InvalidQueryError,
    MapperConfigurationError,
    MapperNotFoundError,
    MappingNotFoundError,
)
from gridquery.mapping import FieldShape, FilterMapper, MapperRegistry, MapperRegistryBuilder, OrderChain
from gridquery.mapping.estates import BuildingMapper, EstateMapper, demo_mappers
from gridquery.models.building import Building
from gridquery.models.estate import Estate
from gridquery.models.partner import Partner
from gridquery.models.tag import Tag


class _PartnerMapper(FilterMapper[Partner]):
    entity = Partner

    def configure(self) -> None:
        self.add_map("full_name", Partner.full_name)
        self.add_map("id", Partner.id)
        self.add_default_order_by("full_name").then_by_descending("id")


class _BrokenOrderMapper(FilterMapper[Partner]):
    entity = Partner

    def configure(self) -> None:
        self.add_map("id", Partner.id)
        self.add_default_order_by("missing")


class FilterMapperTests(unittest.TestCase):
    def test_lookup_is_case_insensitive(self) -> None:
        mapper = EstateMapper()

        self.assertIs(mapper.get("Comment"), mapper.get("comment"))
        self.assertTrue(mapper.has("NUMBER_TEXT"))
        self.assertFalse(mapper.has("nope"))

    def test_unknown_mapping_raises_not_found(self) -> None:
        with self.assertRaises(MappingNotFoundError) as caught:
            EstateMapper().get("nope")

        self.assertEqual(caught.exception.name, "nope")
        self.assertIs(caught.exception.entity, Estate)

    def test_field_shapes_and_flags(self) -> None:
        mapper = EstateMapper()

        self.assertIs(mapper.get("comment").shape, FieldShape.SCALAR)
        self.assertIs(mapper.get("tag_names").shape, FieldShape.COLLECTION)
        self.assertTrue(mapper.is_array("tag_names"))
        self.assertFalse(mapper.is_array("comment"))
        self.assertTrue(mapper.is_encrypted("owner_document"))
        self.assertTrue(mapper.is_encrypted("document_numbers"))
        self.assertFalse(mapper.is_encrypted("comment"))
        self.assertFalse(mapper.is_encrypted("nope"))

    def test_resolve_indexed_property_names(self) -> None:
        mapper = EstateMapper()

        field, index = mapper.resolve("phone_numbers[2]")
        self.assertEqual(field.name, "phone_numbers")
        self.assertEqual(index, 2)

        field, index = mapper.resolve("comment")
        self.assertEqual(field.name, "comment")
        self.assertIsNone(index)

        with self.assertRaises(InvalidQueryError):
            mapper.resolve("comment[0]")
        with self.assertRaises(InvalidQueryError):
            mapper.get("phone_numbers").value_expression(None)
        with self.assertRaises(InvalidQueryError):
            mapper.get("phone_numbers").value_expression(-1)

    def test_default_order_expression_uses_separators(self) -> None:
        self.assertEqual(EstateMapper().default_order_expression(), "id desc")
        self.assertEqual(_PartnerMapper().default_order_expression(), "full_name, id desc")
        self.assertEqual(BuildingMapper().default_order_expression(), "address, id")

    def test_generated_mappings_keep_explicit_ones(self) -> None:
        mapper = BuildingMapper()

        self.assertTrue(mapper.has("partner_id"))
        self.assertTrue(mapper.has("address"))
        self.assertTrue(mapper.has("partner_name"))

    def test_later_registration_overrides_earlier(self) -> None:
        class _Override(FilterMapper[Partner]):
            entity = Partner

            def configure(self) -> None:
                self.add_map("name", Partner.id)
                self.add_map("name", Partner.full_name)

        field = _Override().get("name")
        self.assertIs(field.expression, Partner.full_name)

    def test_missing_entity_is_a_configuration_error(self) -> None:
        class _NoEntity(FilterMapper[Partner]):
            pass

        with self.assertRaises(MapperConfigurationError):
            _NoEntity()

    def test_freeze_validates_default_order_and_blocks_changes(self) -> None:
        with self.assertRaises(MapperConfigurationError):
            _BrokenOrderMapper().freeze()

        mapper = _PartnerMapper().freeze()
        self.assertTrue(mapper.frozen)
        with self.assertRaises(MapperConfigurationError):
            mapper.add_map("status", Partner.status)
        with self.assertRaises(MapperConfigurationError):
            mapper.add_default_order_by("id")

    def test_then_by_requires_default_order(self) -> None:
        class _Chained(FilterMapper[Partner]):
            entity = Partner

        with self.assertRaises(MapperConfigurationError):
            OrderChain(_Chained()).then_by("id")

    def test_describe_lists_names_and_types(self) -> None:
        described = {item.name: item for item in EstateMapper().describe()}

        self.assertEqual(described["id"].type, "int")
        self.assertEqual(described["comment"].type, "str")
        self.assertEqual(described["primary_owner_full_name"].type, "str")
        self.assertEqual(described["owner_document"].type, "bytes")
        self.assertTrue(described["owner_document"].encrypted)
        self.assertTrue(described["tag_names"].array)
        self.assertEqual(described["tag_names"].type, "str")

    def test_projection_of_collection_joins_relationship(self) -> None:
        field = EstateMapper().get("tag_names")
        sql = str(field.projection(Estate, None).compile())

        self.assertIn("JOIN", sql)
        self.assertIn(Tag.__tablename__, sql)

    def test_scalar_subquery_stays_correlated(self) -> None:
        field = EstateMapper().get("building_address")
        sql = str(field.projection(Estate, Estate.status == 0).compile())

        self.assertIn(Building.__tablename__, sql)
        self.assertIn("buildings.id = estates.building_id", sql)
        self.assertNotIn("FROM buildings, estates", sql)


class MapperRegistryTests(unittest.TestCase):
    def test_demo_registry_resolves_by_entity(self) -> None:
        registry = demo_mappers.build()

        self.assertEqual(len(registry), 2)
        self.assertIn(Estate, registry)
        self.assertIsInstance(registry.get(Estate), EstateMapper)
        self.assertTrue(registry.get(Building).frozen)

    def test_missing_mapper_raises(self) -> None:
        registry = MapperRegistry.from_mappers(_PartnerMapper)

        with self.assertRaises(MapperNotFoundError) as caught:
            registry.get(Estate)
        self.assertIs(caught.exception.entity, Estate)
        with self.assertRaises(LookupError):
            registry.get(Tag)

    def test_duplicate_entity_is_rejected(self) -> None:
        with self.assertRaises(MapperConfigurationError):
            MapperRegistry.from_mappers(_PartnerMapper, _BrokenOrderMapper)

    def test_builder_decorator_rejects_duplicates(self) -> None:
        builder = MapperRegistryBuilder()
        decorated = builder.register(_PartnerMapper)

        self.assertIs(decorated, _PartnerMapper)
        self.assertEqual(builder.mapper_types, (_PartnerMapper,))
        with self.assertRaises(MapperConfigurationError):
            builder.register(_PartnerMapper)
        self.assertEqual(builder.build().get(Partner).default_order_expression(), "full_name, id desc")

    def test_registry_is_read_only(self) -> None:
        registry = MapperRegistry.from_mappers(_PartnerMapper)

        with self.assertRaises(TypeError):
            registry._mappers[Estate] = EstateMapper()  # type: ignore[index]


if __name__ == "__main__":
    unittest.main()
