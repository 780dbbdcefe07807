from supagate.filters.coercion import coerce_value
from supagate.filters.engine import apply_condition, apply_filter, build_or_expression, encode_condition
from supagate.filters.models import Condition, FilterNode, Group, parse_filter_node
from supagate.filters.operators import LogicOperator, Operator, format_value, is_supported_operator, map_operator

__all__ = [
    "Condition",
    "Group",
    "FilterNode",
    "parse_filter_node",
    "apply_filter",
    "apply_condition",
    "build_or_expression",
    "encode_condition",
    "coerce_value",
    "Operator",
    "LogicOperator",
    "map_operator",
    "format_value",
    "is_supported_operator",
]
