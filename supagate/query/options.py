"""
Pagination/ordering options and the uniform result shape.
"""
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field


class QueryOptions(BaseModel):
    """Pagination and ordering applied on top of any base query."""
    page: Optional[int] = Field(None, description="1-based page number")
    page_size: Optional[int] = Field(None, alias="pageSize", description="Rows per page")
    order_by: Optional[str] = Field(None, alias="orderBy", description="Column to sort by")
    ascending: bool = Field(True, description="Sort direction; false sorts descending")

    model_config = {"populate_by_name": True}

    @classmethod
    def coerce(cls, options: Union["QueryOptions", Mapping[str, Any], None]) -> "QueryOptions":
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls.model_validate({k: v for k, v in options.items() if v is not None})

    def row_range(self) -> Optional[tuple[int, int]]:
        """Inclusive ``(start, end)`` row range, or None when not paginating."""
        # zero disables paging; negative values go to the service untouched
        if not self.page or not self.page_size:
            return None
        start = (self.page - 1) * self.page_size
        return start, start + self.page_size - 1


class QueryResult(BaseModel):
    """Rows returned by a select plus the total count reported by the service."""
    data: List[Dict[str, Any]] = Field(default_factory=list, description="Query results")
    count: Optional[int] = Field(None, description="Total number of matching records")
