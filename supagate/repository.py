"""
Generic data repository over Supabase tables.
"""
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from postgrest.exceptions import APIError
from postgrest.types import CountMethod

from supagate.errors import AppError, ErrorKind
from supagate.filters.engine import apply_filter
from supagate.filters.models import FilterNode, parse_filter_node
from supagate.logging_config import get_logger, log_performance
from supagate.query.compose import apply_equality_filters, apply_query_options
from supagate.query.options import QueryOptions, QueryResult

logger = get_logger(__name__, "Database")

Columns = Union[str, Sequence[str]]
Options = Union[QueryOptions, Mapping[str, Any], None]


def select_columns(columns: Columns) -> str:
    if isinstance(columns, str):
        return columns or "*"
    return ",".join(str(c).strip() for c in columns if c and str(c).strip()) or "*"


async def execute(query, context: str = "Database"):
    """Run a finished builder once, turning service errors into ``AppError``."""
    try:
        return await query.execute()
    except APIError as e:
        raise AppError(ErrorKind.QUERY_EXECUTION_FAILED, e.message or str(e), context=context) from e


class DataRepository:
    """Select/insert/update/delete over any table of the data service."""

    def __init__(self, client):
        self.client = client

    @log_performance(logger, "select")
    async def select(
        self,
        table_name: str,
        columns: Columns = "*",
        filters: Optional[Mapping[str, Any]] = None,
        options: Options = None,
    ) -> QueryResult:
        """
        Select rows matching plain equality filters.

        Args:
            table_name: Table to read from
            columns: Column list, as a PostgREST select string or a sequence
            filters: Column/value pairs; None values are skipped
            options: Pagination and ordering

        Returns:
            QueryResult with the rows and the exact total count
        """
        try:
            query = self.client.table(table_name).select(select_columns(columns), count=CountMethod.exact)
            query = apply_equality_filters(query, filters)
            query = apply_query_options(query, options)

            response = await execute(query)
            return QueryResult(data=response.data or [], count=response.count)
        except Exception as e:
            logger.error("Error selecting from %s: %s", table_name, e)
            raise

    @log_performance(logger, "select_with_filter")
    async def select_with_filter(
        self,
        table_name: str,
        columns: Columns = "*",
        filter_tree: Union[FilterNode, Mapping[str, Any], None] = None,
        options: Options = None,
    ) -> QueryResult:
        """Select rows matching a filter tree (see ``supagate.filters``)."""
        try:
            node = parse_filter_node(filter_tree)

            query = self.client.table(table_name).select(select_columns(columns), count=CountMethod.exact)
            query = apply_filter(query, node)
            query = apply_query_options(query, options)

            response = await execute(query)
            return QueryResult(data=response.data or [], count=response.count)
        except Exception as e:
            logger.error("Error selecting from %s with complex filter: %s", table_name, e)
            raise

    async def get_by_id(self, table_name: str, record_id: Any) -> Optional[Dict[str, Any]]:
        result = await self.select(table_name, "*", {"id": record_id})
        return result.data[0] if result.data else None

    async def insert(
        self, table_name: str, data: Union[Dict[str, Any], List[Dict[str, Any]]]
    ) -> List[Dict[str, Any]]:
        """Insert one row or a batch and return the created rows."""
        try:
            response = await execute(self.client.table(table_name).insert(data))
            return response.data or []
        except Exception as e:
            logger.error("Error inserting into %s: %s", table_name, e)
            raise

    async def update(
        self, table_name: str, data: Dict[str, Any], filters: Optional[Mapping[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Update rows matching equality filters and return them."""
        try:
            query = apply_equality_filters(self.client.table(table_name).update(data), filters)
            response = await execute(query)
            return response.data or []
        except Exception as e:
            logger.error("Error updating %s: %s", table_name, e)
            raise

    async def delete(self, table_name: str, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """Delete rows matching equality filters and return them."""
        try:
            query = apply_equality_filters(self.client.table(table_name).delete(), filters)
            response = await execute(query)
            return response.data or []
        except Exception as e:
            logger.error("Error deleting from %s: %s", table_name, e)
            raise
