"""
Error logging for statement execution.

CRUD statements are wrapped with `handle_database_exceptions` so a failing
statement is logged once, with its category, at the point it failed. The
exception itself propagates unchanged; the router renders it.
"""
import functools
import logging
from typing import Any, Callable, Optional, Tuple

from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
    StatementError,
    TimeoutError,
)


logger = logging.getLogger(__name__)


class DatabaseErrorHandler:
    """Classifies database failures for logging."""

    # (exception types, category, log level, transient)
    CATEGORIES: Tuple[Tuple[tuple, str, int, bool], ...] = (
        ((IntegrityError,), "integrity", logging.WARNING, False),
        ((ConnectionError, DisconnectionError), "connection", logging.ERROR, True),
        ((TimeoutError,), "timeout", logging.WARNING, True),
        ((OperationalError,), "operational", logging.ERROR, True),
        ((StatementError,), "statement", logging.WARNING, False),
    )

    DATABASE_EXCEPTIONS = (SQLAlchemyError, ConnectionError)

    @classmethod
    def classify(cls, exc: Exception) -> Tuple[str, int, bool]:
        """
        Return (category, log level, transient) for exc.

        Unknown errors are reported as "unexpected" at ERROR level.
        """
        for types, category, level, transient in cls.CATEGORIES:
            if isinstance(exc, types):
                return category, level, transient
        return "unexpected", logging.ERROR, False

    @classmethod
    def handle_database_error(
        cls,
        exc: Exception,
        operation: str,
        context: Optional[dict] = None,
    ) -> Tuple[bool, str]:
        """
        Log exc under its category.

        Returns:
            Tuple of (is_transient, log message)
        """
        category, level, transient = cls.classify(exc)
        message = f"Database {category} error | Operation: {operation} | {type(exc).__name__}: {exc}"
        if context:
            message += f" | Context: {context}"
        logger.log(level, message, exc_info=category == "unexpected")
        return transient, message


def handle_database_exceptions(operation_name: Optional[str] = None) -> Callable:
    """
    Decorate an async statement function so database errors are logged.

    Args:
        operation_name: Name used in log lines (defaults to the function name)
    """
    def decorator(func: Callable) -> Callable:
        operation = operation_name or func.__name__

        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)
            except DatabaseErrorHandler.DATABASE_EXCEPTIONS as exc:
                DatabaseErrorHandler.handle_database_error(
                    exc,
                    operation,
                    {"function": func.__name__},
                )
                raise

        return wrapper

    return decorator
