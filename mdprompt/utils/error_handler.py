"""Shared error handling helpers.

Decorators that log a failed operation through structlog and then either
re-raise it or fall back to a default value, so call sites do not repeat the
same try/except/log block.
"""

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

import structlog

logger = structlog.get_logger("mdprompt.errors")

T = TypeVar("T")


class ErrorHandler:
    """Logging patterns applied when an operation fails"""

    @staticmethod
    def log_failure(operation_name: str, exception: Exception, **kwargs: Any) -> None:
        details = getattr(exception, "to_dict", None)
        fields = details() if callable(details) else {
            "error": str(exception),
            "error_type": type(exception).__name__,
        }
        logger.error(f"Failed to {operation_name}", **fields, **kwargs)

    @classmethod
    def log_and_return_default(
        cls, operation_name: str, exception: Exception, default_value: T, **kwargs: Any
    ) -> T:
        """Log the failure and hand back ``default_value``"""
        cls.log_failure(operation_name, exception, **kwargs)
        return default_value


def handle_errors(
    operation_name: str,
    default_return: Any = None,
    reraise: bool = False,
    **log_kwargs: Any,
):
    """
    Decorator that logs exceptions raised by a sync or async callable.

    Args:
        operation_name: Human readable operation name used in the log event
        default_return: Value returned after a logged failure
        reraise: Re-raise the exception after logging instead of returning
        **log_kwargs: Extra structured fields for the log event
    """

    def on_error(exc: Exception) -> Any:
        if reraise:
            ErrorHandler.log_failure(operation_name, exc, **log_kwargs)
            raise exc
        return ErrorHandler.log_and_return_default(
            operation_name, exc, default_return, **log_kwargs
        )

    def decorator(func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    return on_error(e)

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                return on_error(e)

        return wrapper

    return decorator


def safe_with_default(operation_name: str, default_value: Any, **log_kwargs: Any):
    """Log failures and return ``default_value`` instead of raising"""
    return handle_errors(operation_name, default_return=default_value, **log_kwargs)


def critical_operation(operation_name: str, **log_kwargs: Any):
    """Log failures and re-raise them"""
    return handle_errors(operation_name, reraise=True, **log_kwargs)
