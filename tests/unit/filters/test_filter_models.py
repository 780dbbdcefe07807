"""
Test parsing decoded JSON into filter tree models.
"""
import pytest

from supagate.errors import AppError, ErrorKind
from supagate.filters.models import Condition, Group, parse_filter_node


class TestParseFilterNode:
    """Test the one-time classification of raw nodes."""

    def test_none_stays_none(self):
        assert parse_filter_node(None) is None

    def test_condition(self):
        node = parse_filter_node({"field": "status", "operator": "=", "value": "active"})

        assert isinstance(node, Condition)
        assert node.field == "status"
        assert node.operator == "="
        assert node.value == "active"

    def test_condition_without_value(self):
        node = parse_filter_node({"field": "deleted_at", "operator": "IS NULL"})

        assert isinstance(node, Condition)
        assert node.value is None

    def test_nested_group(self):
        node = parse_filter_node({
            "logic": "AND",
            "filters": [
                {"field": "status", "operator": "=", "value": "active"},
                {"logic": "OR", "filters": [
                    {"field": "role", "operator": "=", "value": "admin"},
                    {"field": "role", "operator": "=", "value": "moderator"},
                ]},
            ],
        })

        assert isinstance(node, Group)
        assert node.logic == "AND"
        assert isinstance(node.filters[0], Condition)
        assert isinstance(node.filters[1], Group)
        assert [c.value for c in node.filters[1].filters] == ["admin", "moderator"]

    def test_empty_group(self):
        node = parse_filter_node({"logic": "OR", "filters": []})

        assert isinstance(node, Group)
        assert node.filters == []

    def test_unknown_operator_and_logic_are_kept_verbatim(self):
        node = parse_filter_node({"logic": "xor", "filters": [{"field": "a", "operator": "between", "value": 1}]})

        assert node.logic == "xor"
        assert node.filters[0].operator == "between"

    def test_null_children_are_dropped(self):
        node = parse_filter_node({"logic": "AND", "filters": [None, {"field": "a", "operator": "=", "value": 1}, None]})

        assert node == Group(logic="AND", filters=[Condition(field="a", operator="=", value=1)])

    def test_group_of_only_null_children_is_empty(self):
        assert parse_filter_node({"logic": "OR", "filters": [None]}).filters == []

    def test_parsed_nodes_are_returned_unchanged(self):
        condition = Condition(field="a", operator="=", value=1)
        assert parse_filter_node(condition) is condition

    @pytest.mark.parametrize("raw", [
        {},
        {"field": "status"},
        {"operator": "="},
        {"logic": "AND"},
        {"logic": "AND", "filters": "not-a-list"},
        {"filters": []},
        ["field", "=", 1],
        "status=active",
        {"logic": "AND", "filters": [{"field": "a"}]},
    ])
    def test_invalid_structures(self, raw):
        with pytest.raises(AppError) as exc_info:
            parse_filter_node(raw)

        assert exc_info.value.kind == ErrorKind.INVALID_FILTER_STRUCTURE
        assert exc_info.value.status_code == 400
        assert exc_info.value.context == "Filter Parser"
