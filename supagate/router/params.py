"""
Turns query parameters and request bodies into the inputs the core expects.
"""
import json
from typing import Any, Dict, Mapping, Optional
from urllib.parse import parse_qsl

from fastapi import Request
from starlette.convertors import Convertor, register_url_convertor
from starlette.requests import ClientDisconnect

from supagate.errors import AppError, ErrorKind
from supagate.filters.coercion import coerce_value
from supagate.filters.models import FilterNode, parse_filter_node
from supagate.query.options import QueryOptions

RESERVED_PARAMS = frozenset({"page", "pageSize", "orderBy", "ascending", "filter"})


def _parse_int(name: str, value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise AppError(
            ErrorKind.INVALID_QUERY_PARAMETER,
            f"Query parameter '{name}' must be an integer, got {value!r}",
            context="Request Parser",
        )


def parse_query_options(params: Mapping[str, str]) -> QueryOptions:
    """``page``, ``pageSize``, ``orderBy`` and ``ascending`` (false only for "false")."""
    return QueryOptions(
        page=_parse_int("page", params.get("page")),
        page_size=_parse_int("pageSize", params.get("pageSize")),
        order_by=params.get("orderBy") or None,
        ascending=params.get("ascending") != "false",
    )


def split_filters(params: Mapping[str, Any]) -> Dict[str, Any]:
    """Every parameter that is not pagination, ordering or ``filter``."""
    return {key: value for key, value in params.items() if key not in RESERVED_PARAMS}


def parse_filter_param(raw: Optional[str]) -> Optional[FilterNode]:
    """Decode the ``filter`` parameter (a JSON filter tree)."""
    if not raw:
        return None
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as e:
        raise AppError(ErrorKind.INVALID_FILTER_JSON, "Invalid filter JSON", context="Data Controller") from e
    return parse_filter_node(decoded)


async def parse_request_body(request: Request) -> Any:
    """
    Decode a JSON or url-encoded form body.

    Form values "true"/"false" become booleans. Other content types, and an
    empty body, give ``{}``.
    """
    content_type = request.headers.get("content-type", "")
    try:
        raw = await request.body()
    except ClientDisconnect as e:
        raise AppError(ErrorKind.INVALID_REQUEST_BODY, "Error reading request body", context="Request Parser") from e

    if "application/json" in content_type:
        if not raw:
            return {}
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise AppError(
                ErrorKind.INVALID_REQUEST_BODY, "Invalid JSON in request body", context="Request Parser"
            ) from e

    if "application/x-www-form-urlencoded" in content_type:
        try:
            pairs = parse_qsl(raw.decode("utf-8"), keep_blank_values=True)
        except UnicodeDecodeError as e:
            raise AppError(
                ErrorKind.INVALID_REQUEST_BODY, "Invalid form data in request body", context="Request Parser"
            ) from e
        return {key: coerce_value(value) for key, value in pairs}

    return {}


class TableNameConvertor(Convertor):
    """Path segment made of word characters only."""
    regex = r"\w+"

    def convert(self, value: str) -> str:
        return value

    def to_string(self, value: str) -> str:
        return str(value)


register_url_convertor("table_name", TableNameConvertor())
