"""Explicitly built, read-only registry of filter mappers keyed by entity type."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, TypeVar

from gridquery.exceptions import MapperConfigurationError, MapperNotFoundError
from gridquery.mapping.mapper import FilterMapper

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=type[FilterMapper[Any]])


class MapperRegistry:
    """One frozen mapper instance per entity type.

    The registry never changes after construction, so it can be shared by
    concurrent requests without locking.
    """

    def __init__(self, mappers: Iterable[FilterMapper[Any]] = ()) -> None:
        by_entity: dict[type, FilterMapper[Any]] = {}
        for mapper in mappers:
            entity = mapper.entity
            if entity in by_entity:
                raise MapperConfigurationError(
                    f"Entity {entity.__name__} is mapped by both "
                    f"{type(by_entity[entity]).__name__} and {type(mapper).__name__}."
                )
            by_entity[entity] = mapper if mapper.frozen else mapper.freeze()
        self._mappers: Mapping[type, FilterMapper[Any]] = MappingProxyType(by_entity)

    @classmethod
    def from_mappers(cls, *mapper_types: type[FilterMapper[Any]]) -> MapperRegistry:
        """Instantiate each mapper class once and register it."""

        registry = cls(mapper_type() for mapper_type in mapper_types)
        logger.info(
            "gridquery.registry_built mappers=%d entities=%s",
            len(registry),
            ",".join(sorted(entity.__name__ for entity in registry.entities())),
        )
        return registry

    def get(self, entity: type) -> FilterMapper[Any]:
        mapper = self._mappers.get(entity)
        if mapper is None:
            raise MapperNotFoundError(entity)
        return mapper

    def entities(self) -> Iterator[type]:
        return iter(self._mappers)

    def __contains__(self, entity: object) -> bool:
        return entity in self._mappers

    def __len__(self) -> int:
        return len(self._mappers)


class MapperRegistryBuilder:
    """Collects mapper classes at import time and builds a registry on demand.

    ``register`` returns the class unchanged, so it works as a decorator.
    """

    def __init__(self) -> None:
        self._mapper_types: list[type[FilterMapper[Any]]] = []

    def register(self, mapper_type: M) -> M:
        if mapper_type in self._mapper_types:
            raise MapperConfigurationError(f"{mapper_type.__name__} is already registered.")
        self._mapper_types.append(mapper_type)
        return mapper_type

    @property
    def mapper_types(self) -> tuple[type[FilterMapper[Any]], ...]:
        return tuple(self._mapper_types)

    def build(self) -> MapperRegistry:
        return MapperRegistry.from_mappers(*self._mapper_types)
