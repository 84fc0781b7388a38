"""
Decorators for error handling and request logging.

Every Azure DevOps call is made exactly once: failures are translated into
the refresh error hierarchy and propagated, never retried.
"""

import logging
from functools import wraps
from typing import Callable, TypeVar

import requests

from .errors import ReportRefreshError, TransportFailure

# Type variable for generic function signatures
T = TypeVar('T')

# Configure logging
logger = logging.getLogger(__name__)


def handle_api_error(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator to translate transport errors into refresh errors.

    - ReportRefreshError subclasses pass through unchanged
    - requests exceptions (connection refused, DNS, TLS, timeout) become TransportFailure
    - anything else becomes a plain ReportRefreshError

    Args:
        func: The async function to wrap

    Returns:
        Wrapped function with error handling

    Example:
        @handle_api_error
        async def get_iterations(self):
            return await asyncio.to_thread(self._request, 'GET', url)
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except ReportRefreshError:
            raise
        except requests.exceptions.RequestException as e:
            logger.error(f"Connection error in {func.__name__}: {type(e).__name__}")
            raise TransportFailure(
                message=f"Could not reach Azure DevOps in {func.__name__}: {e}",
                original_error=e
            )
        except Exception as e:
            logger.error(
                f"Unexpected error in {func.__name__}: {str(e)}",
                exc_info=True
            )
            raise ReportRefreshError(
                message=f"Unexpected error in {func.__name__}: {str(e)}",
                original_error=e
            )

    return wrapper


def log_execution(
    level: int = logging.DEBUG,
    log_args: bool = False
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator to log function execution.

    Args:
        level: Logging level (default: DEBUG)
        log_args: Whether to log function arguments (default: False)

    Returns:
        Decorator function
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            func_name = func.__name__

            if log_args:
                # Skip 'self'
                logger.log(level, f"Calling {func_name} with args={args[1:]}, kwargs={kwargs}")
            else:
                logger.log(level, f"Calling {func_name}")

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                logger.log(level, f"{func_name} failed with error: {e}")
                raise

            logger.log(level, f"{func_name} completed successfully")
            return result

        return wrapper
    return decorator


def api_operation(log_args: bool = False) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Convenience decorator combining logging and error handling.

    Applies decorators in order:
    1. Execution logging (outermost)
    2. Error handling (innermost)

    Example:
        @api_operation()
        async def get_work_items(self, ids):
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        decorated = handle_api_error(func)
        decorated = log_execution(log_args=log_args)(decorated)
        return decorated

    return decorator
