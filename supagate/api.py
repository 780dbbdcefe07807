from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from supagate.config import Settings
from supagate.errors import register_exception_handlers
from supagate.logging_config import get_logger
from supagate.router.router import GatewayRouter

logger = get_logger(__name__, "Server")


def create_app(settings: Settings | None = None, client=None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(title="supagate")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    register_exception_handlers(app, include_stack=settings.is_development)
    app.include_router(GatewayRouter(settings=settings, client=client, prefix="/api"))
    return app


app = create_app()
