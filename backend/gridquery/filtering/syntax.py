"""Parser for Gridify-style filter strings.

Grammar::

    expression := conjunction ("|" conjunction)*
    conjunction := factor ("," factor)*
    factor := "(" expression ")" | condition
    condition := field ["[" index "]"] operator value ["/i"]

Values run until an unescaped ``,``, ``|`` or ``)``; a backslash escapes the
next character. ``/i`` right before a delimiter makes the match
case-insensitive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, NoReturn, Union

from gridquery.exceptions import FilterSyntaxError


class Operator(str, Enum):
    EQUAL = "="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    GREATER_THAN = ">"
    LESS_OR_EQUAL = "<="
    GREATER_OR_EQUAL = ">="
    CONTAINS = "=*"
    NOT_CONTAINS = "!*"
    STARTS_WITH = "^"
    NOT_STARTS_WITH = "!^"
    ENDS_WITH = "$"
    NOT_ENDS_WITH = "!$"


# Longest tokens first so "<=" wins over "<".
_OPERATOR_TOKENS = sorted((op.value for op in Operator), key=len, reverse=True)
_FIELD = re.compile(r"\s*(?P<field>[A-Za-z_][\w.]*)\s*(?:\[\s*(?P<index>\d+)\s*\])?\s*")
_CUSTOM_OPERATOR = re.compile(r"#[A-Za-z_]+")
_VALUE_TERMINATORS = frozenset(",|)")
_CASE_INSENSITIVE_SUFFIX = "/i"

SEARCH_OPERATORS = frozenset({Operator.CONTAINS, Operator.STARTS_WITH, Operator.ENDS_WITH})


@dataclass(frozen=True, slots=True)
class Condition:
    field: str
    operator: Operator | str
    value: str
    index: int | None = None
    case_insensitive: bool = False


@dataclass(frozen=True, slots=True)
class Group:
    conjunction: str
    children: tuple[FilterNode, ...]


FilterNode = Union[Condition, Group]


@dataclass(frozen=True, slots=True)
class SearchTerm:
    """A substring or prefix match found in a filter for one field."""

    value: str
    operator: Operator
    case_insensitive: bool = False


def parse_filter(text: str | None) -> FilterNode | None:
    """Parse ``text``; blank input means "no filter" and returns ``None``."""

    if text is None or not text.strip():
        return None
    return _Parser(text).parse()


def iter_conditions(node: FilterNode | None) -> Iterator[Condition]:
    if node is None:
        return
    if isinstance(node, Condition):
        yield node
        return
    for child in node.children:
        yield from iter_conditions(child)


def find_search_term(text: str | None, field_name: str) -> SearchTerm | None:
    """Return the first contains/starts/ends match on ``field_name``, if any."""

    wanted = field_name.strip().lower()
    for condition in iter_conditions(parse_filter(text)):
        if condition.index is not None or condition.field.lower() != wanted:
            continue
        if condition.operator in SEARCH_OPERATORS and condition.value:
            return SearchTerm(
                value=condition.value,
                operator=Operator(condition.operator),
                case_insensitive=condition.case_insensitive,
            )
    return None


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def parse(self) -> FilterNode:
        node = self._expression()
        self._skip_whitespace()
        if self.pos < len(self.text):
            self._fail(f"Unexpected {self.text[self.pos]!r}")
        return node

    def _expression(self) -> FilterNode:
        children = [self._conjunction()]
        while self._accept("|"):
            children.append(self._conjunction())
        return children[0] if len(children) == 1 else Group("or", tuple(children))

    def _conjunction(self) -> FilterNode:
        children = [self._factor()]
        while self._accept(","):
            children.append(self._factor())
        return children[0] if len(children) == 1 else Group("and", tuple(children))

    def _factor(self) -> FilterNode:
        if self._accept("("):
            node = self._expression()
            if not self._accept(")"):
                self._fail("Missing closing parenthesis")
            return node
        return self._condition()

    def _condition(self) -> Condition:
        match = _FIELD.match(self.text, self.pos)
        if match is None:
            self._fail("Expected a field name")
        self.pos = match.end()
        operator = self._operator()
        value, case_insensitive = self._value()
        index = match.group("index")
        return Condition(
            field=match.group("field"),
            operator=operator,
            value=value,
            index=int(index) if index is not None else None,
            case_insensitive=case_insensitive,
        )

    def _operator(self) -> Operator | str:
        custom = _CUSTOM_OPERATOR.match(self.text, self.pos)
        if custom is not None:
            self.pos = custom.end()
            return custom.group(0)
        for token in _OPERATOR_TOKENS:
            if self.text.startswith(token, self.pos):
                self.pos += len(token)
                return Operator(token)
        self._fail("Expected an operator")

    def _value(self) -> tuple[str, bool]:
        chars: list[str] = []
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            if char == "\\":
                if self.pos + 1 >= len(text):
                    self._fail("Dangling escape character")
                chars.append(text[self.pos + 1])
                self.pos += 2
                continue
            if char in _VALUE_TERMINATORS:
                break
            if text.startswith(_CASE_INSENSITIVE_SUFFIX, self.pos) and self._at_value_end(self.pos + 2):
                self.pos += 2
                return "".join(chars), True
            chars.append(char)
            self.pos += 1
        return "".join(chars), False

    def _at_value_end(self, position: int) -> bool:
        return position >= len(self.text) or self.text[position] in _VALUE_TERMINATORS

    def _accept(self, token: str) -> bool:
        self._skip_whitespace()
        if self.text.startswith(token, self.pos):
            self.pos += len(token)
            return True
        return False

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _fail(self, message: str) -> NoReturn:
        raise FilterSyntaxError(message, text=self.text, position=self.pos)
