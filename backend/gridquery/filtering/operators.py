"""Custom filter operators, keyed by their lower-cased ``#name``."""

from typing import Any, Callable

from sqlalchemy import Integer, cast
from sqlalchemy.sql.elements import ColumnElement


def has_flag(value: ColumnElement[Any], flag: Any) -> ColumnElement[bool]:
    """``value & flag == flag`` for integer bit-flag columns."""

    flag = int(flag)
    return cast(value, Integer).op("&")(flag) == flag


CUSTOM_OPERATORS: dict[str, Callable[[ColumnElement[Any], Any], ColumnElement[bool]]] = {
    "#hasflag": has_flag,
}
