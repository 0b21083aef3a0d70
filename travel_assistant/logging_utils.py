"""
Centralized logging and error handling utilities for the travel assistant.

This module provides decorators and helper functions to standardize logging
and error handling patterns across the codebase.

Features:
- Structured logging with contextual information
- Error classification for structured error logs
- Decorator converting unexpected failures into AssistantError subclasses
- Performance timing
"""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, ParamSpec, TypeVar

import httpx
import structlog
from pydantic import ValidationError

from .exceptions import (
    AssistantError,
    ItineraryError,
    StreamSetupError,
    StreamTransportError,
)

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(colors=True),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

# Type variables for generic decorators
P = ParamSpec("P")
T = TypeVar("T")
AsyncCallable = Callable[P, Awaitable[T]]

logger = structlog.get_logger(__name__)


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name)


def configure_logging(logging_config: dict[str, Any] | None = None) -> None:
    """Apply the YAML ``logging`` section to the stdlib root logger."""
    logging_config = logging_config or {}
    level_name = str(logging_config.get("level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown logging level '{level_name}'")
    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger().setLevel(level)


class ErrorClassifier:
    """Centralized error classification with structured logging."""

    @staticmethod
    def classify_error(error: Exception) -> tuple[int | None, str]:
        """
        Classify an error and return its HTTP status (if any) and category.

        Args:
            error: The exception to classify

        Returns:
            Tuple of (status_code, error_category)
        """
        if isinstance(error, StreamSetupError):
            return error.status_code, "setup_error"
        if isinstance(error, ItineraryError):
            return error.status_code, "itinerary_error"
        if isinstance(error, httpx.TimeoutException | TimeoutError):
            return None, "timeout_error"
        if isinstance(error, StreamTransportError):
            return error.status_code, "transport_error"
        if isinstance(error, httpx.TransportError | ConnectionError | OSError):
            return None, "transport_error"
        if isinstance(error, ValidationError):
            return None, "validation_error"
        if isinstance(error, ValueError | TypeError):
            return None, "parameter_error"
        return None, "unknown_error"

    @staticmethod
    def create_error(
        error: Exception,
        operation: str,
        error_cls: type[AssistantError] = AssistantError,
        context: dict[str, Any] | None = None,
        custom_message: str | None = None,
    ) -> AssistantError:
        """
        Create an AssistantError subclass with structured logging.

        Args:
            error: Original exception
            operation: Description of the operation that failed
            error_cls: AssistantError subclass to build
            context: Additional context for logging and error data
            custom_message: Override the default error message

        Returns:
            Instance of ``error_cls`` carrying the error context
        """
        status_code, error_category = ErrorClassifier.classify_error(error)
        context = context or {}

        if custom_message:
            message = custom_message
        elif isinstance(error, AssistantError):
            message = error.message
        else:
            message = f"{operation} failed: {error!s}"

        logger.error(
            "Operation failed",
            operation=operation,
            error_type=type(error).__name__,
            error_category=error_category,
            status_code=status_code,
            error_message=str(error),
            **context,
        )

        return error_cls(
            message,
            status_code=status_code,
            response_data={
                "operation": operation,
                "error_category": error_category,
                "original_error_type": type(error).__name__,
                **context,
            },
        )


def log_operation(
    operation: str,
    *,
    log_args: bool = False,
    log_result: bool = False,
    log_timing: bool = True,
    context: dict[str, Any] | None = None,
) -> Callable[[AsyncCallable[P, T]], AsyncCallable[P, T]]:
    """
    Decorator for logging async operations with structured context.

    Args:
        operation: Description of the operation being performed
        log_args: Whether to log function arguments
        log_result: Whether to log function result
        log_timing: Whether to log execution timing
        context: Additional context to include in logs

    Returns:
        Decorated function with logging
    """
    def decorator(func: AsyncCallable[P, T]) -> AsyncCallable[P, T]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            operation_logger = logger.bind(
                operation=operation,
                function=func.__name__,
                **(context or {}),
            )

            log_data = {}
            if log_args:
                log_data.update({
                    "args": args[1:] if args else [],  # Skip 'self' if present
                    "kwargs": kwargs,
                })

            operation_logger.info("Operation started", **log_data)

            start_time = time.perf_counter() if log_timing else None

            try:
                result = await func(*args, **kwargs)

                end_log_data: dict[str, Any] = {}
                if log_timing and start_time is not None:
                    duration = round((time.perf_counter() - start_time) * 1000, 2)
                    end_log_data["duration_ms"] = duration
                if log_result:
                    end_log_data["result"] = result

                operation_logger.info(
                    "Operation completed successfully", **end_log_data
                )
                return result

            except Exception as e:
                error_log_data: dict[str, Any] = {
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                }
                if log_timing and start_time is not None:
                    duration = round((time.perf_counter() - start_time) * 1000, 2)
                    error_log_data["duration_ms"] = duration

                operation_logger.error("Operation failed", **error_log_data)
                raise

        return wrapper
    return decorator


def wrap_errors(
    operation: str,
    error_cls: type[AssistantError],
    *,
    context: dict[str, Any] | None = None,
    custom_message: str | None = None,
) -> Callable[[AsyncCallable[P, T]], AsyncCallable[P, T]]:
    """
    Decorator converting unexpected exceptions into ``error_cls``.

    AssistantError instances are re-raised unchanged.
    """
    def decorator(func: AsyncCallable[P, T]) -> AsyncCallable[P, T]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except AssistantError:
                raise
            except Exception as e:
                raise ErrorClassifier.create_error(
                    e, operation, error_cls, context, custom_message
                ) from e

        return wrapper
    return decorator


@asynccontextmanager
async def operation_context(
    operation: str,
    *,
    context: dict[str, Any] | None = None,
    log_timing: bool = True,
):
    """
    Async context manager for operation logging.

    Args:
        operation: Description of the operation
        context: Additional context for logging
        log_timing: Whether to log operation timing

    Yields:
        Bound logger for the operation
    """
    operation_logger = logger.bind(
        operation=operation,
        **(context or {}),
    )

    operation_logger.info("Operation started")
    start_time = time.perf_counter() if log_timing else None

    try:
        yield operation_logger

        log_data: dict[str, Any] = {}
        if log_timing and start_time is not None:
            duration = round((time.perf_counter() - start_time) * 1000, 2)
            log_data["duration_ms"] = duration

        operation_logger.info("Operation completed successfully", **log_data)

    except Exception as e:
        error_log_data: dict[str, Any] = {
            "error_type": type(e).__name__,
            "error_message": str(e),
        }
        if log_timing and start_time is not None:
            duration = round((time.perf_counter() - start_time) * 1000, 2)
            error_log_data["duration_ms"] = duration

        operation_logger.error("Operation failed", **error_log_data)
        raise


class ContextualLogger:
    """Logger that maintains context across related operations."""

    def __init__(self, base_context: dict[str, Any] | None = None):
        self.base_context = base_context or {}
        self._logger = logger.bind(**self.base_context)

    def bind(self, **context: Any) -> ContextualLogger:
        """Create a new logger with additional context."""
        merged_context = {**self.base_context, **context}
        return ContextualLogger(merged_context)

    def info(self, message: str, **context: Any) -> None:
        self._logger.info(message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._logger.warning(message, **context)

    def error(self, message: str, **context: Any) -> None:
        self._logger.error(message, **context)

    def debug(self, message: str, **context: Any) -> None:
        self._logger.debug(message, **context)
