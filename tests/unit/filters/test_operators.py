"""
Tests for operator mapping and OR-list value formatting.
"""
import pytest

from supagate.filters.operators import OPERATOR_TOKENS, Operator, format_value, is_supported_operator, map_operator


class TestMapOperator:
    """Test the operator → PostgREST token table."""

    @pytest.mark.parametrize("operator,token", [
        ("=", "eq"),
        ("<>", "neq"),
        ("!=", "neq"),
        (">", "gt"),
        (">=", "gte"),
        ("<", "lt"),
        ("<=", "lte"),
        ("LIKE", "like"),
        ("ILIKE", "ilike"),
        ("IN", "in"),
        ("IS", "is"),
        ("IS NOT", "not.is"),
        ("IS NULL", "is"),
        ("IS NOT NULL", "not.is"),
    ])
    def test_known_operators(self, operator, token):
        assert map_operator(operator) == token

    def test_case_insensitive(self):
        assert map_operator("ilike") == "ilike"
        assert map_operator("is not null") == "not.is"
        assert map_operator("In") == "in"

    def test_unknown_operator_returned_unchanged(self):
        assert map_operator("between") == "between"
        assert map_operator("~") == "~"

    def test_every_operator_has_a_token(self):
        assert set(OPERATOR_TOKENS) == set(Operator)

    def test_is_supported_operator(self):
        assert is_supported_operator("is null")
        assert is_supported_operator("=")
        assert not is_supported_operator("between")


class TestFormatValue:
    """Test value formatting for OR expressions."""

    def test_none(self):
        assert format_value(None) == "null"

    def test_string_is_double_quoted(self):
        assert format_value("admin") == '"admin"'

    def test_booleans(self):
        assert format_value(True) == "true"
        assert format_value(False) == "false"

    def test_numbers(self):
        assert format_value(42) == "42"
        assert format_value(1.5) == "1.5"

    def test_list_is_parenthesized_recursively(self):
        assert format_value(["a", 1, None, True]) == '("a",1,null,true)'

    def test_tuple_like_list(self):
        assert format_value((1, 2)) == "(1,2)"

    @pytest.mark.parametrize("raw,expected", [
        ('mo"d', r'"mo\"d"'),
        ("back\\slash", r'"back\\slash"'),
        ('a\\"b', r'"a\\\"b"'),
        ("comma,and)paren", '"comma,and)paren"'),
    ])
    def test_quotes_and_backslashes_are_escaped(self, raw, expected):
        assert format_value(raw) == expected

    def test_escaped_values_inside_lists(self):
        assert format_value(['say "hi"', "ok"]) == r'("say \"hi\"","ok")'
