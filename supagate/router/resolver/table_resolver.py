"""
Generic CRUD endpoints for any table of the data service.
"""
from typing import Any, Dict

from fastapi import APIRouter, Request, status

from supagate.errors import AppError, ErrorKind
from supagate.logging_config import get_logger
from supagate.query.options import QueryResult
from supagate.router.params import parse_filter_param, parse_query_options, parse_request_body, split_filters
from supagate.router.resolver.resolver import Resolver

CONTEXT = "Data Controller"

logger = get_logger(__name__, CONTEXT)


class TableResolver(Resolver):
    """Mounts ``/data/{table}`` and ``/data/{table}/{record_id}`` routes."""

    def __init__(self, base_path: str = "/data"):
        self.base_path = base_path
        self.router = None

    @property
    def repository(self):
        return self.router.get_repository()

    def mount(self, router: APIRouter):
        self.router = router

        collection_path = f"{self.base_path}/{{table:table_name}}"
        item_path = f"{self.base_path}/{{table:table_name}}/{{record_id}}"

        router.add_api_route(
            collection_path,
            self.get_records,
            methods=["GET"],
            response_model=QueryResult,
            summary="List records",
            description="Retrieve records with equality query parameters or a JSON `filter` tree, "
                        "plus `page`, `pageSize`, `orderBy` and `ascending`.",
        )
        router.add_api_route(
            collection_path,
            self.create_record,
            methods=["POST"],
            status_code=status.HTTP_201_CREATED,
            summary="Create records",
            description="Insert one record or a list of records.",
        )
        router.add_api_route(
            item_path,
            self.get_record,
            methods=["GET"],
            summary="Get a record by id",
        )
        router.add_api_route(
            item_path,
            self.update_record,
            methods=["PUT"],
            summary="Update a record by id",
        )
        router.add_api_route(
            item_path,
            self.delete_record,
            methods=["DELETE"],
            summary="Delete a record by id",
        )

    async def get_records(self, table: str, request: Request) -> QueryResult:
        params = dict(request.query_params)
        options = parse_query_options(params)
        filter_tree = parse_filter_param(params.get("filter"))

        if filter_tree is not None:
            return await self.repository.select_with_filter(table, "*", filter_tree, options)
        return await self.repository.select(table, "*", split_filters(params), options)

    async def get_record(self, table: str, record_id: str) -> Dict[str, Any]:
        record = await self.repository.get_by_id(table, record_id)
        if record is None:
            raise self._not_found(table, record_id)
        return {"data": record}

    async def create_record(self, table: str, request: Request) -> Dict[str, Any]:
        payload = await parse_request_body(request)
        if not payload:
            raise AppError(ErrorKind.MISSING_BODY, "Request body is required", context=CONTEXT)
        if not isinstance(payload, (dict, list)):
            raise AppError(ErrorKind.INVALID_REQUEST_BODY, "Body must be an object or a list of objects", context=CONTEXT)
        created = await self.repository.insert(table, payload)
        logger.info("Inserted %d record(s) into %s", len(created), table)
        return {"data": created}

    async def update_record(self, table: str, record_id: str, request: Request) -> Dict[str, Any]:
        payload = await parse_request_body(request)
        if not payload:
            raise AppError(ErrorKind.MISSING_BODY, "Request body is required", context=CONTEXT)
        if not isinstance(payload, dict):
            raise AppError(ErrorKind.INVALID_REQUEST_BODY, "Update body must be an object", context=CONTEXT)
        updated = await self.repository.update(table, payload, {"id": record_id})
        if not updated:
            raise self._not_found(table, record_id)
        return {"data": updated[0]}

    async def delete_record(self, table: str, record_id: str) -> Dict[str, Any]:
        deleted = await self.repository.delete(table, {"id": record_id})
        if not deleted:
            raise self._not_found(table, record_id)
        logger.info("Deleted record %s from %s", record_id, table)
        return {"success": True, "data": deleted[0]}

    @staticmethod
    def _not_found(table: str, record_id: str) -> AppError:
        return AppError(
            ErrorKind.RECORD_NOT_FOUND,
            f"Record not found in {table} with id {record_id}",
            context=CONTEXT,
        )
