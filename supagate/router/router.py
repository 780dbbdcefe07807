from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI

from supagate.client import create_service_client
from supagate.config import Settings
from supagate.errors import AppError, ErrorKind
from supagate.logging_config import get_logger
from supagate.repository import DataRepository
from supagate.router.resolver.table_resolver import TableResolver
from supagate.router.resolver.view_resolver import ViewResolver
from supagate.views.engine import ViewEngine

logger = get_logger(__name__, "Router")


class GatewayRouter(APIRouter):
    """
    Router exposing the data and view endpoints.

    The Supabase client is created once in ``lifespan`` unless one is passed
    in, in which case it is used as is and the lifespan creates nothing.
    """

    def __init__(self,
                 settings: Settings | None = None,
                 client=None,
                 **kwargs):
        super().__init__(**kwargs, lifespan=self.lifespan)

        self.settings = settings or Settings.from_env()
        self.initialized = False
        self._client = None
        self._repository: DataRepository | None = None
        self._view_engine: ViewEngine | None = None

        if client is not None:
            self.bind(client)

        TableResolver().mount(self)
        ViewResolver().mount(self)

    @asynccontextmanager
    async def lifespan(self, app: FastAPI):
        if self._client is None:
            self.bind(await create_service_client(self.settings))

        self.initialized = True
        logger.info("GatewayRouter ready with %d routes", len(self.routes))
        yield

    def bind(self, client):
        self._client = client
        self._repository = DataRepository(client)
        self._view_engine = ViewEngine(client, self._repository)

    def get_repository(self) -> DataRepository:
        if self._repository is None:
            raise self._unavailable()
        return self._repository

    def get_view_engine(self) -> ViewEngine:
        if self._view_engine is None:
            raise self._unavailable()
        return self._view_engine

    @staticmethod
    def _unavailable() -> AppError:
        return AppError(
            ErrorKind.SERVICE_UNAVAILABLE,
            "Data service client is not initialized",
            context="Router",
        )
