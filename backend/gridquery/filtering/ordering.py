"""Parse Gridify-style order strings and turn them into ORDER BY clauses."""

from __future__ import annotations

import re
from typing import Any

from sqlalchemy import Select
from sqlalchemy.sql.elements import ColumnElement

from gridquery.exceptions import FilterSyntaxError, InvalidQueryError
from gridquery.mapping.mapper import FilterMapper, OrderTerm

_TERM = re.compile(r"^\s*(?P<field>[A-Za-z_][\w.]*(?:\s*\[\s*\d+\s*\])?)(?:\s+(?P<direction>asc|desc))?\s*$", re.I)


def parse_order_by(text: str | None) -> list[OrderTerm]:
    """Parse ``"field [asc|desc], ..."``; blank input yields no terms."""

    if text is None or not text.strip():
        return []
    terms: list[OrderTerm] = []
    position = 0
    for segment in text.split(","):
        match = _TERM.match(segment)
        if match is None:
            raise FilterSyntaxError("Invalid ordering term", text=text, position=position)
        direction = (match.group("direction") or "asc").lower()
        terms.append(OrderTerm(field=match.group("field").replace(" ", ""), descending=direction == "desc"))
        position += len(segment) + 1
    return terms


def order_clauses(terms: list[OrderTerm] | tuple[OrderTerm, ...], mapper: FilterMapper[Any]) -> list[ColumnElement[Any]]:
    clauses: list[ColumnElement[Any]] = []
    for term in terms:
        field, index = mapper.resolve(term.field)
        if field.is_array:
            raise InvalidQueryError(f"Cannot order by collection field {field.name!r}.")
        expression = field.value_expression(index)
        clauses.append(expression.desc() if term.descending else expression.asc())
    return clauses


def apply_order(statement: Select[Any], text: str | None, mapper: FilterMapper[Any]) -> Select[Any]:
    clauses = order_clauses(parse_order_by(text), mapper)
    return statement.order_by(*clauses) if clauses else statement
