"""
Creation of the process-wide Supabase client.

The client is built once (normally in the router lifespan) and passed to
``DataRepository`` and ``ViewEngine``; nothing here caches it globally.
"""
from supabase import AsyncClient, acreate_client

from supagate.config import Settings
from supagate.errors import AppError, ErrorKind
from supagate.logging_config import get_logger

logger = get_logger(__name__, "Configuration")


async def create_service_client(settings: Settings) -> AsyncClient:
    """Create the async Supabase client, failing fast on missing credentials."""
    if not settings.supabase_url or not settings.supabase_key:
        raise AppError(
            ErrorKind.CONFIGURATION_ERROR,
            "Missing Supabase credentials. Set SUPABASE_URL and SUPABASE_KEY "
            "(or SUPABASE_SERVICE_ROLE).",
            context="Configuration",
        )

    try:
        client = await acreate_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error("Failed to initialize Supabase client: %s", e)
        raise
    logger.info("Supabase client initialized for %s", settings.supabase_url)
    return client
