"""
Logging setup for supagate.

Records carry a ``context`` attribute holding the same label ``AppError`` uses
("Filter Parser", "Database", "View Engine", ...). Module loggers get it from
``get_logger(__name__, CONTEXT)``; records from other libraries get "-".
"""

import asyncio
import functools
import logging
import logging.config
import os
import sys
import time
from typing import Any, Dict, Optional

DEFAULT_CONTEXT = "-"


class ContextFilter(logging.Filter):
    """Stamp records with a context label unless they already carry one."""

    def __init__(self, label: str = DEFAULT_CONTEXT):
        super().__init__()
        self.label = label

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "context", None):
            record.context = self.label
        return True


def get_log_level() -> str:
    return os.getenv("SUPAGATE_LOG_LEVEL", "INFO").upper()


def get_log_format() -> str:
    """Production adds the source location; development stays short."""
    if os.getenv("SUPAGATE_ENV", "development").lower() == "production":
        return "%(asctime)s | %(levelname)s | %(context)s | %(name)s | %(message)s | %(pathname)s:%(lineno)d"
    return "%(asctime)s | %(levelname)-8s | %(context)-15s | %(message)s"


def get_logging_config() -> Dict[str, Any]:
    """dictConfig for supagate, uvicorn and the httpx transport used by supabase-py."""
    log_level = get_log_level()
    handlers = ["console"]

    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "context": {"()": ContextFilter},
        },
        "formatters": {
            "standard": {
                "format": get_log_format(),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "standard",
                "filters": ["context"],
                "stream": sys.stdout,
            },
        },
        "loggers": {
            "supagate": {"level": log_level, "handlers": handlers, "propagate": False},
            "uvicorn": {"level": "INFO", "handlers": handlers, "propagate": False},
            # one line per PostgREST request otherwise
            "httpx": {"level": "WARNING", "handlers": handlers, "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": handlers},
    }

    log_file = os.getenv("SUPAGATE_LOG_FILE")
    if log_file:
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": "standard",
            "filters": ["context"],
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
        }
        config["loggers"]["supagate"]["handlers"] = handlers + ["file"]

    return config


def setup_logging() -> None:
    logging.config.dictConfig(get_logging_config())
    logging.getLogger("supagate.logging").info(
        "Logging configured with level %s", get_log_level(), extra={"context": "Logging"}
    )


def get_logger(name: str, context: Optional[str] = None) -> logging.Logger:
    """
    Logger under the ``supagate`` hierarchy.

    Args:
        name: Module name; prefixed with ``supagate.`` when outside the package
        context: Label stamped on every record of this logger
    """
    if name == "__main__":
        name = "supagate.main"
    elif not name.startswith("supagate"):
        name = f"supagate.{name}"

    logger = logging.getLogger(name)
    if context and not any(isinstance(f, ContextFilter) for f in logger.filters):
        logger.addFilter(ContextFilter(context))
    return logger


def log_performance(logger: logging.Logger, operation: str):
    """Log how long ``operation`` took, at debug on success and error on failure."""

    def report(start: float, error: Optional[Exception] = None) -> None:
        duration = time.perf_counter() - start
        if error is None:
            logger.debug("Operation '%s' completed in %.3fs", operation, duration)
        else:
            logger.error("Operation '%s' failed after %.3fs: %s", operation, duration, error)

    def decorator(func):
        if asyncio.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                start = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    report(start, e)
                    raise
                report(start)
                return result

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                report(start, e)
                raise
            report(start)
            return result

        return wrapper

    return decorator


if not logging.getLogger().handlers:
    setup_logging()
