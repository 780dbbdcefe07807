"""
Models for stored view definitions (``view_definitions`` table).
"""
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


class JoinEndpoint(BaseModel):
    table: str = Field(..., description="Table name")
    field: str = Field(..., description="Column used in the join condition")


class JoinSpec(BaseModel):
    """One link of a view's join chain."""
    from_: JoinEndpoint = Field(..., alias="from", description="Left side of the join")
    join_type: str = Field(..., alias="joinType", description="left or inner")
    to: JoinEndpoint = Field(..., description="Right side of the join, embedded into the result")

    model_config = {"populate_by_name": True}

    @property
    def condition(self) -> str:
        return f"{self.from_.table}.{self.from_.field}={self.to.table}.{self.to.field}"


class ViewDefinition(BaseModel):
    """A base table, an ordered join chain and the columns callers may filter on."""
    id: Any = Field(..., description="View identifier")
    name: Optional[str] = Field(None, description="Display name")
    description: Optional[str] = Field(None, description="Free-form description")
    is_public: bool = Field(False, description="Whether the view is meant for anonymous callers")
    join_definition: List[JoinSpec] = Field(..., min_length=1, description="Joins, applied in order")
    allowed_filters: List[str] = Field(default_factory=list, description="Filterable 'table.column' names")

    @field_validator("allowed_filters", mode="before")
    @classmethod
    def _null_allowlist(cls, value):
        return value or []

    @field_validator("is_public", mode="before")
    @classmethod
    def _null_is_private(cls, value):
        return value if value is not None else False

    @property
    def base_table(self) -> str:
        return self.join_definition[0].from_.table
