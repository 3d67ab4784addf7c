"""Structured logging configuration."""

import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

from order_engine.config import get_settings


def setup_logging() -> None:
    """Configure structured logging for the application."""
    settings = get_settings()

    # Configure standard library logging
    log_level = getattr(logging, settings.log_level)

    if settings.log_format == "json":
        # JSON logging for production
        handler = logging.StreamHandler(sys.stdout)
        formatter = jsonlogger.JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "asctime": "timestamp"},
        )
        handler.setFormatter(formatter)
    else:
        # Human-readable logging for development
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer() if settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


class ComponentLogger:
    """Logger that gives every engine component the same record shape."""

    def __init__(self, component: str):
        self.component = component
        self.logger = get_logger(component)

    def log_operation(
        self,
        action: str,
        order_id: str | None = None,
        duration_ms: float | None = None,
        **kwargs: Any,
    ) -> None:
        """Log a completed operation with structured data."""
        log_data: dict[str, Any] = {
            "component": self.component,
            "action": action,
        }

        if order_id is not None:
            log_data["order_id"] = order_id
        if duration_ms is not None:
            log_data["duration_ms"] = round(duration_ms, 2)

        log_data.update(kwargs)
        self.logger.info(action, **log_data)

    def log_retry(
        self,
        operation: str,
        attempt: int,
        max_retries: int,
        wait_seconds: float,
        error: str,
    ) -> None:
        """Log a retry of a retryable failure."""
        self.logger.warning(
            "operation_retry",
            component=self.component,
            operation=operation,
            attempt=attempt,
            max_retries=max_retries,
            wait_seconds=wait_seconds,
            error=error,
        )

    def log_rejection(self, operation: str, code: str, message: str, **kwargs: Any) -> None:
        """Log a request rejected with a terminal error."""
        self.logger.info(
            "operation_rejected",
            component=self.component,
            operation=operation,
            code=code,
            error=message,
            **kwargs,
        )

    def log_error(self, error: str, **kwargs: Any) -> None:
        """Log an error."""
        self.logger.error(
            "component_error",
            component=self.component,
            error=error,
            **kwargs,
        )
