"""
Comparison operators accepted in filter trees and their PostgREST tokens.
"""
from enum import StrEnum
from typing import Any


class Operator(StrEnum):
    EQ = "="
    NEQ = "<>"
    NEQ_ALT = "!="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    LIKE = "LIKE"
    ILIKE = "ILIKE"
    IN = "IN"
    IS = "IS"
    IS_NOT = "IS NOT"
    IS_NULL = "IS NULL"
    IS_NOT_NULL = "IS NOT NULL"


class LogicOperator(StrEnum):
    AND = "AND"
    OR = "OR"


OPERATOR_TOKENS = {
    Operator.EQ: "eq",
    Operator.NEQ: "neq",
    Operator.NEQ_ALT: "neq",
    Operator.GT: "gt",
    Operator.GTE: "gte",
    Operator.LT: "lt",
    Operator.LTE: "lte",
    Operator.LIKE: "like",
    Operator.ILIKE: "ilike",
    Operator.IN: "in",
    Operator.IS: "is",
    Operator.IS_NOT: "not.is",
    Operator.IS_NULL: "is",
    Operator.IS_NOT_NULL: "not.is",
}


def normalize_operator(operator: str) -> str:
    return operator.upper()


def is_supported_operator(operator: str) -> bool:
    return normalize_operator(operator) in OPERATOR_TOKENS


def map_operator(operator: str) -> str:
    """
    Map an operator to its PostgREST token.

    Unknown operators come back unchanged; callers that dispatch to the
    query builder check ``is_supported_operator`` first.
    """
    key = normalize_operator(operator)
    if key in OPERATOR_TOKENS:
        return OPERATOR_TOKENS[Operator(key)]
    return operator


def format_value(value: Any) -> str:
    """Format a value the way PostgREST expects it inside an ``or=(...)`` list."""
    if value is None:
        return "null"
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    # bool before the generic branch, str(True) would give "True"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "(" + ",".join(format_value(item) for item in value) + ")"
    return str(value)
