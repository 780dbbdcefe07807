"""
Applies a parsed filter tree to a PostgREST query builder.

AND groups chain builder calls; OR groups become a single ``or_`` call whose
argument is the PostgREST textual form, e.g. ``role.eq."admin",age.gt.30``.
"""
from typing import Any, List, Optional, TypeVar

from supagate.errors import AppError, ErrorKind
from supagate.filters.coercion import coerce_value
from supagate.filters.models import Condition, FilterNode, Group
from supagate.filters.operators import (
    LogicOperator,
    Operator,
    format_value,
    is_supported_operator,
    map_operator,
    normalize_operator,
)
from supagate.logging_config import get_logger

Q = TypeVar("Q")

CONTEXT = "Filter Parser"

logger = get_logger(__name__, CONTEXT)


def apply_filter(query: Q, node: Optional[FilterNode]) -> Q:
    """Apply ``node`` to ``query`` and return the resulting builder."""
    if node is None:
        return query

    if isinstance(node, Condition):
        return apply_condition(query, node)

    if isinstance(node, Group):
        return _apply_group(query, node)

    raise AppError(ErrorKind.INVALID_FILTER_STRUCTURE, "Invalid filter structure", context=CONTEXT)


def _apply_group(query: Q, group: Group) -> Q:
    if not group.filters:
        return query

    if len(group.filters) == 1:
        return apply_filter(query, group.filters[0])

    logic = group.logic.upper()
    if logic == LogicOperator.AND:
        for child in group.filters:
            query = apply_filter(query, child)
        return query

    if logic == LogicOperator.OR:
        expression = build_or_expression(group.filters)
        logger.debug("OR expression: %s", expression)
        return query.or_(expression)

    raise AppError(ErrorKind.UNSUPPORTED_LOGIC, f"Unsupported logic operator: {group.logic}", context=CONTEXT)


def apply_condition(query: Q, condition: Condition) -> Q:
    """Dispatch one condition to the matching builder primitive."""
    field = condition.field
    operator = normalize_operator(condition.operator)
    value = coerce_value(condition.value)

    if operator == Operator.EQ:
        return query.eq(field, value)
    elif operator in (Operator.NEQ, Operator.NEQ_ALT):
        return query.neq(field, value)
    elif operator == Operator.GT:
        return query.gt(field, value)
    elif operator == Operator.GTE:
        return query.gte(field, value)
    elif operator == Operator.LT:
        return query.lt(field, value)
    elif operator == Operator.LTE:
        return query.lte(field, value)
    elif operator == Operator.LIKE:
        return query.like(field, value)
    elif operator == Operator.ILIKE:
        return query.ilike(field, value)
    elif operator == Operator.IN:
        return query.in_(field, _as_list(value))
    elif operator == Operator.IS_NULL:
        return query.is_(field, "null")
    elif operator == Operator.IS_NOT_NULL:
        return query.not_.is_(field, "null")
    elif operator == Operator.IS:
        if value is None:
            return query.is_(field, "null")
        raise AppError(
            ErrorKind.UNSUPPORTED_OPERATOR_VALUE, "IS operator only supports null values", context=CONTEXT
        )
    elif operator == Operator.IS_NOT:
        if value is None:
            return query.not_.is_(field, "null")
        raise AppError(
            ErrorKind.UNSUPPORTED_OPERATOR_VALUE, "IS NOT operator only supports null values", context=CONTEXT
        )

    raise AppError(ErrorKind.UNSUPPORTED_OPERATOR, f"Unsupported operator: {condition.operator}", context=CONTEXT)


def build_or_expression(nodes: List[FilterNode]) -> str:
    """
    Encode the children of an OR group as one PostgREST filter list.

    Nested groups are flattened into their leaf conditions: an inner AND
    reads the same as an inner OR.
    """
    parts = []
    for node in nodes:
        if isinstance(node, Condition):
            parts.append(encode_condition(node))
        else:
            parts.extend(encode_condition(leaf) for leaf in _leaf_conditions(node))
    return ",".join(parts)


def encode_condition(condition: Condition) -> str:
    """``field.token.value``, using the same token ``map_operator`` gives."""
    if not is_supported_operator(condition.operator):
        raise AppError(
            ErrorKind.UNSUPPORTED_OPERATOR, f"Unsupported operator: {condition.operator}", context=CONTEXT
        )
    value = coerce_value(condition.value)
    if normalize_operator(condition.operator) == Operator.IN:
        value = _as_list(value)
    return f"{condition.field}.{map_operator(condition.operator)}.{format_value(value)}"


def _leaf_conditions(group: Group) -> List[Condition]:
    leaves = []
    for child in group.filters:
        if isinstance(child, Condition):
            leaves.append(child)
        else:
            leaves.extend(_leaf_conditions(child))
    return leaves


def _as_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]
