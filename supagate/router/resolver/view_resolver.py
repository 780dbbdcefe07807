from fastapi import APIRouter, Request

from supagate.query.options import QueryResult
from supagate.router.params import parse_query_options, split_filters
from supagate.router.resolver.resolver import Resolver


class ViewResolver(Resolver):
    """Mounts ``/view/{view_id}``; query parameters become view filters."""

    def __init__(self, base_path: str = "/view"):
        self.base_path = base_path
        self.router = None

    def mount(self, router: APIRouter):
        self.router = router
        router.add_api_route(
            f"{self.base_path}/{{view_id}}",
            self.run_view,
            methods=["GET"],
            response_model=QueryResult,
            summary="Run a stored view",
            description="Execute a view definition. Only filters listed in the view's "
                        "allowed_filters are applied; others are ignored.",
        )

    async def run_view(self, view_id: str, request: Request) -> QueryResult:
        params = dict(request.query_params)
        view_engine = self.router.get_view_engine()
        return await view_engine.run_view(view_id, split_filters(params), parse_query_options(params))
