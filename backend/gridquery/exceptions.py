"""Errors raised by query shaping, mapping and resolution."""


class GridQueryError(RuntimeError):
    """Base class for every error raised by gridquery."""


class InvalidQueryError(GridQueryError, ValueError):
    """A query model or query string carries an invalid value."""


class FilterSyntaxError(InvalidQueryError):
    """A filter or order string could not be parsed."""

    def __init__(self, message: str, *, text: str, position: int) -> None:
        super().__init__(f"{message} at position {position}: {text!r}")
        self.text = text
        self.position = position


class MapperConfigurationError(GridQueryError):
    """A mapper or registry was configured inconsistently."""


class MapperNotFoundError(GridQueryError, LookupError):
    """No mapper is registered for an entity type."""

    def __init__(self, entity: type) -> None:
        super().__init__(f"No filter mapper registered for {entity.__name__}")
        self.entity = entity


class MappingNotFoundError(GridQueryError, LookupError):
    """A mapper has no field registered under the requested name."""

    def __init__(self, entity: type, name: str) -> None:
        super().__init__(f"Mapping {name!r} is not defined for {entity.__name__}")
        self.entity = entity
        self.name = name


class MissingDecryptorError(GridQueryError):
    """An encrypted column was resolved without a decrypt function."""


class SelectorTypeError(GridQueryError, TypeError):
    """A mapped expression does not produce the type an operation needs."""


class UnsupportedAggregateError(GridQueryError, NotImplementedError):
    """The requested aggregate kind is not supported."""
