"""Unit tests for filter and order string parsing."""

import unittest

from gridquery.exceptions import FilterSyntaxError
from gridquery.filtering import (
    Condition,
    Group,
    Operator,
    escape_filter_value,
    find_search_term,
    parse_filter,
    parse_order_by,
)


class ParseFilterTests(unittest.TestCase):
    def test_blank_filter_means_no_filter(self) -> None:
        self.assertIsNone(parse_filter(None))
        self.assertIsNone(parse_filter(""))
        self.assertIsNone(parse_filter("   "))

    def test_single_condition(self) -> None:
        node = parse_filter("status=1")

        self.assertEqual(node, Condition(field="status", operator=Operator.EQUAL, value="1"))

    def test_longest_operator_wins(self) -> None:
        self.assertEqual(parse_filter("sqm<=40").operator, Operator.LESS_OR_EQUAL)
        self.assertEqual(parse_filter("sqm>=40").operator, Operator.GREATER_OR_EQUAL)
        self.assertEqual(parse_filter("comment!=x").operator, Operator.NOT_EQUAL)
        self.assertEqual(parse_filter("comment=*x").operator, Operator.CONTAINS)
        self.assertEqual(parse_filter("comment!*x").operator, Operator.NOT_CONTAINS)
        self.assertEqual(parse_filter("comment!^x").operator, Operator.NOT_STARTS_WITH)
        self.assertEqual(parse_filter("comment$x").operator, Operator.ENDS_WITH)

    def test_and_binds_tighter_than_or(self) -> None:
        node = parse_filter("status=1,sqm>10|comment=x")

        self.assertIsInstance(node, Group)
        self.assertEqual(node.conjunction, "or")
        self.assertEqual(node.children[0].conjunction, "and")
        self.assertEqual(node.children[1].field, "comment")

    def test_parentheses_group_conditions(self) -> None:
        node = parse_filter("status=1,(comment=a|comment=b)")

        self.assertEqual(node.conjunction, "and")
        self.assertEqual(node.children[1].conjunction, "or")
        self.assertEqual([child.value for child in node.children[1].children], ["a", "b"])

    def test_index_and_case_insensitive_suffix(self) -> None:
        node = parse_filter("phone_numbers[1]=*555/i")

        self.assertEqual(node.field, "phone_numbers")
        self.assertEqual(node.index, 1)
        self.assertEqual(node.value, "555")
        self.assertTrue(node.case_insensitive)

    def test_suffix_inside_value_is_literal(self) -> None:
        node = parse_filter("comment=a/ib")

        self.assertEqual(node.value, "a/ib")
        self.assertFalse(node.case_insensitive)

    def test_escaped_delimiters_stay_in_value(self) -> None:
        node = parse_filter(r"comment=a\,b\|c\(d\)")

        self.assertEqual(node.value, "a,b|c(d)")

    def test_empty_value_and_custom_operator(self) -> None:
        self.assertEqual(parse_filter("comment=").value, "")

        node = parse_filter("status#hasFlag4")
        self.assertEqual(node.operator, "#hasFlag")
        self.assertEqual(node.value, "4")

    def test_syntax_errors_report_position(self) -> None:
        for text in ("status", "(status=1", "status=1)", "=1", "comment=abc\\"):
            with self.subTest(text=text):
                with self.assertRaises(FilterSyntaxError) as caught:
                    parse_filter(text)
                self.assertEqual(caught.exception.text, text)
                self.assertGreaterEqual(caught.exception.position, 0)


class SearchTermTests(unittest.TestCase):
    def test_finds_search_operator_on_requested_field(self) -> None:
        term = find_search_term("status=0,Number_Text=*33/i", "number_text")

        self.assertEqual(term.value, "33")
        self.assertEqual(term.operator, Operator.CONTAINS)
        self.assertTrue(term.case_insensitive)

    def test_ignores_other_fields_and_operators(self) -> None:
        self.assertIsNone(find_search_term("comment=*x", "number_text"))
        self.assertIsNone(find_search_term("number_text=33", "number_text"))
        self.assertIsNone(find_search_term(None, "number_text"))


class EscapeFilterValueTests(unittest.TestCase):
    def test_special_characters_are_escaped(self) -> None:
        self.assertEqual(escape_filter_value("a,b|c"), r"a\,b\|c")
        self.assertEqual(escape_filter_value("(x)$"), r"\(x\)\$")
        self.assertEqual(escape_filter_value("abc/i"), r"abc\/i")

    def test_already_escaped_characters_are_left_alone(self) -> None:
        self.assertEqual(escape_filter_value(r"a\,b"), r"a\,b")

    def test_blank_values_pass_through(self) -> None:
        self.assertIsNone(escape_filter_value(None))
        self.assertEqual(escape_filter_value("  "), "  ")

    def test_escaped_value_parses_back(self) -> None:
        raw = "Main St. (North), 5|6"
        node = parse_filter(f"comment={escape_filter_value(raw)}")

        self.assertEqual(node.value, raw)


class ParseOrderByTests(unittest.TestCase):
    def test_directions_default_to_ascending(self) -> None:
        terms = parse_order_by("sqm desc, id, comment ASC")

        self.assertEqual([term.field for term in terms], ["sqm", "id", "comment"])
        self.assertEqual([term.descending for term in terms], [True, False, False])

    def test_indexed_term(self) -> None:
        (term,) = parse_order_by("phone_numbers[0] desc")

        self.assertEqual(term.field, "phone_numbers[0]")
        self.assertTrue(term.descending)

    def test_blank_and_invalid(self) -> None:
        self.assertEqual(parse_order_by(None), [])
        self.assertEqual(parse_order_by(" "), [])
        with self.assertRaises(FilterSyntaxError):
            parse_order_by("sqm sideways")
        with self.assertRaises(FilterSyntaxError):
            parse_order_by("sqm,,id")


if __name__ == "__main__":
    unittest.main()
