"""Structured logging for the extractor."""

import logging
import sys
import time
import uuid
from contextvars import ContextVar
from functools import wraps
from logging.handlers import RotatingFileHandler
from typing import Any, Callable, Dict, Optional

import structlog
from structlog.stdlib import LoggerFactory

from .config import AppSettings, LogFormat, get_settings

# One id per pipeline run, so every line of a run can be grepped together
run_id_var: ContextVar[Optional[str]] = ContextVar("run_id", default=None)


def new_run_id() -> str:
    """Start a new run and return its id."""
    run_id = str(uuid.uuid4())[:8]
    run_id_var.set(run_id)
    return run_id


def clear_run_id() -> None:
    """Clear the run id from the current context."""
    run_id_var.set(None)


def add_run_id(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add the current run id to log events."""
    run_id = run_id_var.get()
    if run_id is not None:
        event_dict["run_id"] = run_id
    return event_dict


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """Configure structlog on top of stdlib logging.

    Log lines go to stderr; stdout is reserved for the CSV echo.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.LOG_LEVEL.upper())

    processors = [
        structlog.contextvars.merge_contextvars,
        add_run_id,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == LogFormat.JSON:
        processors.append(structlog.processors.JSONRenderer())
    elif settings.LOG_FORMAT == LogFormat.STRUCTURED:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers = [logging.StreamHandler(sys.stderr)]
    if settings.LOG_FILE:
        settings.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            settings.LOG_FILE,
            maxBytes=_parse_size(settings.LOG_MAX_SIZE),
            backupCount=settings.LOG_BACKUP_COUNT
        )
        file_handler.setLevel(level)
        handlers.append(file_handler)

    for handler in handlers:
        handler.setFormatter(logging.Formatter("%(message)s"))

    logging.basicConfig(level=level, handlers=handlers, format="%(message)s", force=True)

    # watchdog is chatty at debug level
    logging.getLogger("watchdog").setLevel(logging.WARNING)


def _parse_size(size_str: str) -> int:
    """Parse size string like '100MB' into bytes."""
    size_str = size_str.strip().upper()
    if size_str.endswith('KB'):
        return int(size_str[:-2]) * 1024
    elif size_str.endswith('MB'):
        return int(size_str[:-2]) * 1024 * 1024
    elif size_str.endswith('GB'):
        return int(size_str[:-2]) * 1024 * 1024 * 1024
    else:
        return int(size_str)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def monitor_function(metric_name: Optional[str] = None):
    """Decorator that logs how long a call took, and logs failures before re-raising."""
    def decorator(func: Callable) -> Callable:
        function_name = metric_name or f"{func.__module__}.{func.__name__}"

        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            logger = get_logger(func.__module__)

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Function {function_name} failed",
                    error=str(e),
                    duration_ms=round((time.time() - start_time) * 1000, 2),
                    function=function_name,
                    exc_info=True
                )
                raise

            logger.debug(
                f"Function {function_name} completed",
                duration_ms=round((time.time() - start_time) * 1000, 2),
                function=function_name
            )
            return result
        return wrapper
    return decorator
