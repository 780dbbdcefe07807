"""
Query composition shared by table selects and view execution.
"""
from typing import Any, Mapping, Optional, TypeVar, Union

from supagate.filters.coercion import coerce_value
from supagate.query.options import QueryOptions

Q = TypeVar("Q")


def apply_equality_filters(query: Q, filters: Optional[Mapping[str, Any]]) -> Q:
    """Add ``eq`` for every filter entry whose value is not None."""
    for key, value in (filters or {}).items():
        if value is None:
            continue
        query = query.eq(key, coerce_value(value))
    return query


def apply_pagination(query: Q, options: QueryOptions) -> Q:
    row_range = options.row_range()
    if row_range is not None:
        query = query.range(*row_range)
    return query


def apply_ordering(query: Q, options: QueryOptions) -> Q:
    if options.order_by:
        query = query.order(options.order_by, desc=not options.ascending)
    return query


def apply_query_options(query: Q, options: Union[QueryOptions, Mapping[str, Any], None]) -> Q:
    """Apply the row range, then the ordering."""
    options = QueryOptions.coerce(options)
    query = apply_pagination(query, options)
    return apply_ordering(query, options)
