"""
Filter tree models and the parser that turns decoded JSON into them.

A raw node is classified exactly once, in ``parse_filter_node``; the engine
only ever sees ``Condition`` and ``Group`` instances.
"""
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from supagate.errors import AppError, ErrorKind


class Condition(BaseModel):
    """A single field/operator/value comparison."""
    field: str = Field(..., description="Column to compare against")
    operator: str = Field(..., description="Comparison operator, e.g. '=', 'IN', 'IS NULL'")
    value: Optional[Any] = Field(None, description="Value to compare with")


class Group(BaseModel):
    """A boolean combinator over an ordered list of child nodes."""
    logic: str = Field(..., description="Logical operator, AND or OR")
    filters: List[Union["Condition", "Group"]] = Field(
        default_factory=list, description="Child nodes, applied in order"
    )


Group.model_rebuild()

FilterNode = Union[Condition, Group]


def _invalid(message: str = "Invalid filter structure") -> AppError:
    return AppError(ErrorKind.INVALID_FILTER_STRUCTURE, message, context="Filter Parser")


def parse_filter_node(raw: Any) -> Optional[FilterNode]:
    """
    Classify a decoded filter tree into ``Condition`` / ``Group`` models.

    ``None`` stays ``None``. Already-parsed nodes are returned as they are.
    """
    if raw is None:
        return None
    if isinstance(raw, (Condition, Group)):
        return raw
    if not isinstance(raw, Mapping):
        raise _invalid()

    try:
        if raw.get("field") and raw.get("operator"):
            return Condition(field=raw["field"], operator=raw["operator"], value=raw.get("value"))

        children = raw.get("filters")
        if raw.get("logic") and isinstance(children, list):
            # null children apply nothing
            parsed = (parse_filter_node(child) for child in children)
            return Group(logic=raw["logic"], filters=[node for node in parsed if node is not None])
    except ValidationError as e:
        raise _invalid(f"Invalid filter structure: {e.errors()[0]['msg']}") from e

    raise _invalid()
