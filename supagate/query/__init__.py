from supagate.query.compose import apply_equality_filters, apply_ordering, apply_pagination, apply_query_options
from supagate.query.options import QueryOptions, QueryResult

__all__ = [
    "QueryOptions",
    "QueryResult",
    "apply_equality_filters",
    "apply_pagination",
    "apply_ordering",
    "apply_query_options",
]
