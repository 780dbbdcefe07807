"""
Engine for processing and executing stored view definitions.

A view is a base table plus an ordered join chain. Joins become PostgREST
embedded resources in the select string: ``left`` embeds ``table(*)`` and
``inner`` embeds ``table!inner(*)``; a join starting from an already embedded
table is nested inside it.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from postgrest.types import CountMethod
from pydantic import ValidationError

from supagate.errors import AppError, ErrorKind
from supagate.filters.coercion import coerce_value
from supagate.logging_config import get_logger, log_performance
from supagate.query.compose import apply_query_options
from supagate.query.options import QueryOptions, QueryResult
from supagate.repository import DataRepository, execute
from supagate.views.models import ViewDefinition

VIEW_DEFINITIONS_TABLE = "view_definitions"

CONTEXT = "View Engine"

logger = get_logger(__name__, CONTEXT)

JOIN_SUFFIXES = {
    "left": "",
    "inner": "!inner",
}


@dataclass
class _Embed:
    table: str
    suffix: str = ""
    children: List["_Embed"] = field(default_factory=list)

    def render(self) -> str:
        return f"{self.table}{self.suffix}({_columns(self.children)})"


def _columns(children: List[_Embed]) -> str:
    return ",".join(["*"] + [child.render() for child in children])


class ViewEngine:
    """Fetches view definitions and runs them against the data service."""

    def __init__(self, client, repository: Optional[DataRepository] = None):
        self.client = client
        self.repository = repository or DataRepository(client)

    async def get_view_definition(self, view_id: Any) -> ViewDefinition:
        """Load a view definition by id; every call goes back to the service."""
        try:
            result = await self.repository.select(VIEW_DEFINITIONS_TABLE, "*", {"id": view_id})
            if not result.data:
                raise AppError(ErrorKind.VIEW_NOT_FOUND, f"View definition not found: {view_id}", context=CONTEXT)
            return self._parse_definition(result.data[0])
        except Exception as e:
            logger.error("Error fetching view definition %s: %s", view_id, e)
            raise

    def build_select(self, definition: ViewDefinition) -> str:
        """Render the join chain as a PostgREST select string."""
        for join in definition.join_definition:
            if join.join_type.lower() not in JOIN_SUFFIXES:
                raise self._unsupported_join(join.join_type)

        root = _Embed(definition.base_table)
        embedded: Dict[str, _Embed] = {definition.base_table: root}

        for join in definition.join_definition:
            parent = embedded.get(join.from_.table)
            if parent is None:
                logger.warning(
                    "Join %s starts from %s which is not joined yet; embedding at top level",
                    join.condition, join.from_.table,
                )
                parent = root
            logger.debug("Applying %s join %s", join.join_type.lower(), join.condition)

            node = _Embed(join.to.table, JOIN_SUFFIXES[join.join_type.lower()])
            parent.children.append(node)
            embedded.setdefault(join.to.table, node)

        return _columns(root.children)

    def resolve_filter_column(self, definition: ViewDefinition, key: str) -> Optional[str]:
        """
        Match a caller filter key against the view's allowlist.

        ``key`` may be the full ``table.column`` entry or just the column.
        Returns the column to filter on (bare for the base table, qualified
        for embedded tables) or None when the key is not allowed.
        """
        for entry in definition.allowed_filters:
            table, _, column = entry.rpartition(".")
            if key != entry and key != column:
                continue
            if not table or table == definition.base_table:
                return column
            return entry
        return None

    @log_performance(logger, "execute_view")
    async def execute_view(
        self,
        definition: Union[ViewDefinition, Mapping[str, Any]],
        filters: Optional[Mapping[str, Any]] = None,
        options: Union[QueryOptions, Mapping[str, Any], None] = None,
    ) -> QueryResult:
        """Build the joined query, apply allowed filters and options, run it once."""
        try:
            if not isinstance(definition, ViewDefinition):
                definition = self._parse_definition(definition)

            query = self.client.table(definition.base_table).select(
                self.build_select(definition), count=CountMethod.exact
            )

            for key, value in (filters or {}).items():
                column = self.resolve_filter_column(definition, key)
                if column is None:
                    logger.debug("Dropping filter %s: not allowed for view %s", key, definition.id)
                    continue
                if value is None:
                    continue
                query = query.eq(column, coerce_value(value))

            query = apply_query_options(query, options)

            response = await execute(query, context=CONTEXT)
            return QueryResult(data=response.data or [], count=response.count)
        except Exception as e:
            logger.error("Error executing view: %s", e)
            raise

    async def run_view(
        self,
        view_id: Any,
        filters: Optional[Mapping[str, Any]] = None,
        options: Union[QueryOptions, Mapping[str, Any], None] = None,
    ) -> QueryResult:
        try:
            definition = await self.get_view_definition(view_id)

            if not definition.is_public:
                logger.warning("Accessing non-public view: %s", view_id)

            return await self.execute_view(definition, filters, options)
        except Exception as e:
            logger.error("Error running view %s: %s", view_id, e)
            raise

    @classmethod
    def _parse_definition(cls, record: Mapping[str, Any]) -> ViewDefinition:
        cls._check_raw_join_types(record)
        try:
            return ViewDefinition.model_validate(record)
        except ValidationError as e:
            raise AppError(
                ErrorKind.INVALID_VIEW_DEFINITION,
                f"View definition {record.get('id')} is malformed: {e.errors()[0]['msg']}",
                context=CONTEXT,
            ) from e

    @classmethod
    def _check_raw_join_types(cls, record: Mapping[str, Any]) -> None:
        """Reject unsupported join types before the rest of the record is validated."""
        joins = record.get("join_definition")
        if not isinstance(joins, list):
            return
        for join in joins:
            if not isinstance(join, Mapping):
                continue
            join_type = join.get("joinType", join.get("join_type"))
            if isinstance(join_type, str) and join_type.lower() not in JOIN_SUFFIXES:
                raise cls._unsupported_join(join_type)

    @staticmethod
    def _unsupported_join(join_type: str) -> AppError:
        if join_type.lower() == "right":
            message = "Right joins are not supported"
        else:
            message = f"Unknown join type: {join_type}"
        return AppError(ErrorKind.UNSUPPORTED_JOIN_TYPE, message, context=CONTEXT)
