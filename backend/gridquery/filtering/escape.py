"""Escaping of user input embedded in filter strings."""

import re

_SPECIAL = re.compile(r"(?<!\\)([(),|$]|/i)")


def escape_filter_value(value: str | None) -> str | None:
    """Backslash-escape characters that would otherwise end or alter a value."""

    if value is None or not value.strip():
        return value
    return _SPECIAL.sub(r"\\\1", value)
