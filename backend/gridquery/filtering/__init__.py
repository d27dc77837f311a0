"""Gridify-style filter and order strings translated to SQLAlchemy clauses."""

from gridquery.filtering.compiler import apply_filter, build_filter_clause
from gridquery.filtering.escape import escape_filter_value
from gridquery.filtering.ordering import apply_order, order_clauses, parse_order_by
from gridquery.filtering.syntax import (
    Condition,
    FilterNode,
    Group,
    Operator,
    SearchTerm,
    find_search_term,
    parse_filter,
)

__all__ = [
    "Condition",
    "FilterNode",
    "Group",
    "Operator",
    "SearchTerm",
    "apply_filter",
    "apply_order",
    "build_filter_clause",
    "escape_filter_value",
    "find_search_term",
    "order_clauses",
    "parse_filter",
    "parse_order_by",
]
