"""Translate parsed filters into SQLAlchemy criteria through a mapper."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from sqlalchemy import Select, String, and_, cast, func, or_
from sqlalchemy.sql.elements import ColumnElement

from gridquery.exceptions import InvalidQueryError
from gridquery.filtering.operators import CUSTOM_OPERATORS
from gridquery.filtering.syntax import Condition, FilterNode, Group, Operator, parse_filter
from gridquery.mapping.fields import FieldMap
from gridquery.mapping.mapper import FilterMapper

NULL_LITERAL = "null"

_NEGATED = {
    Operator.NOT_EQUAL: Operator.EQUAL,
    Operator.NOT_CONTAINS: Operator.CONTAINS,
    Operator.NOT_STARTS_WITH: Operator.STARTS_WITH,
    Operator.NOT_ENDS_WITH: Operator.ENDS_WITH,
}
_TEXT_MATCHERS = {
    Operator.CONTAINS: ("contains", "icontains"),
    Operator.STARTS_WITH: ("startswith", "istartswith"),
    Operator.ENDS_WITH: ("endswith", "iendswith"),
}

Builder = Callable[[ColumnElement[Any]], ColumnElement[bool]]


def build_filter_clause(text: str | None, mapper: FilterMapper[Any]) -> ColumnElement[bool] | None:
    """Return the criteria for ``text``, or ``None`` when there is no filter."""

    node = parse_filter(text)
    if node is None:
        return None
    return _compile(node, mapper)


def apply_filter(statement: Select[Any], text: str | None, mapper: FilterMapper[Any]) -> Select[Any]:
    clause = build_filter_clause(text, mapper)
    return statement if clause is None else statement.where(clause)


def _compile(node: FilterNode, mapper: FilterMapper[Any]) -> ColumnElement[bool]:
    if isinstance(node, Group):
        clauses = [_compile(child, mapper) for child in node.children]
        return and_(*clauses) if node.conjunction == "and" else or_(*clauses)
    return _compile_condition(node, mapper)


def _compile_condition(condition: Condition, mapper: FilterMapper[Any]) -> ColumnElement[bool]:
    field = mapper.get(condition.field)
    if isinstance(condition.operator, str) and condition.operator.startswith("#"):
        return field.predicate(_custom_builder(field, condition), index=condition.index)

    operator = Operator(condition.operator)
    positive = _NEGATED.get(operator)
    if field.is_array and _is_null_test(condition, positive or operator):
        empty = field.null_predicate(condition.index)
        return empty if positive is None else ~empty
    if positive is None:
        return field.predicate(_builder(field, condition, operator), index=condition.index)

    build = _builder(field, condition, positive)
    if field.is_array:
        return field.predicate(build, index=condition.index, negate=True)
    if _is_null_test(condition, positive):
        return field.predicate(lambda value: ~build(value), index=condition.index)
    # SQL NOT drops NULL rows; a "not equal/contains" match keeps them.
    return field.predicate(lambda value: or_(~build(value), value.is_(None)), index=condition.index)


def _is_null_test(condition: Condition, operator: Operator) -> bool:
    return operator is Operator.EQUAL and condition.value in ("", NULL_LITERAL)


def _builder(field: FieldMap, condition: Condition, operator: Operator) -> Builder:
    raw = condition.value

    if operator in _TEXT_MATCHERS:
        method, insensitive_method = _TEXT_MATCHERS[operator]
        name = insensitive_method if condition.case_insensitive else method

        def text_match(value: ColumnElement[Any]) -> ColumnElement[bool]:
            text_value = value if isinstance(value.type, String) else cast(value, String)
            return getattr(text_value, name)(raw, autoescape=True)

        return text_match

    if operator is Operator.EQUAL and raw == NULL_LITERAL:
        return lambda value: value.is_(None)
    if operator is Operator.EQUAL and raw == "":
        return _empty_match

    def compare(value: ColumnElement[Any]) -> ColumnElement[bool]:
        typed = _convert(field, raw, value)
        if condition.case_insensitive and isinstance(typed, str):
            value, typed = func.lower(value), typed.lower()
        if operator is Operator.EQUAL:
            return value == typed
        if operator is Operator.LESS_THAN:
            return value < typed
        if operator is Operator.GREATER_THAN:
            return value > typed
        if operator is Operator.LESS_OR_EQUAL:
            return value <= typed
        return value >= typed

    return compare


def _custom_builder(field: FieldMap, condition: Condition) -> Builder:
    handler = CUSTOM_OPERATORS.get(condition.operator.lower())
    if handler is None:
        raise InvalidQueryError(f"Unknown filter operator {condition.operator!r}.")
    return lambda value: handler(value, _convert(field, condition.value, value))


def _empty_match(value: ColumnElement[Any]) -> ColumnElement[bool]:
    if isinstance(value.type, String):
        return or_(value.is_(None), value == "")
    return value.is_(None)


def _convert(field: FieldMap, raw: str, value: ColumnElement[Any]) -> Any:
    if field.convertor is not None:
        return field.convertor(raw)
    try:
        python_type = value.type.python_type
    except NotImplementedError:
        return raw
    try:
        return _coerce(raw, python_type)
    except (ValueError, InvalidOperation, KeyError) as exc:
        raise InvalidQueryError(
            f"Value {raw!r} is not a valid {python_type.__name__} for {field.name!r}."
        ) from exc


def _coerce(raw: str, python_type: type) -> Any:
    if python_type is str:
        return raw
    text = raw.strip()
    if python_type is bool:
        lowered = text.lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
        raise ValueError(raw)
    if python_type is datetime:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    if python_type is date:
        return date.fromisoformat(text)
    if python_type is bytes:
        return raw.encode("utf-8")
    if issubclass(python_type, Enum):
        try:
            return python_type[text]
        except KeyError:
            return python_type(text)
    if python_type in (int, float, Decimal):
        return python_type(text)
    return raw
