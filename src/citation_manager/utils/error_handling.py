"""Error handling utilities."""
import logging
from functools import wraps
from typing import Any, Callable

from ..exceptions import CitationError

logger = logging.getLogger(__name__)


def log_errors(operation: str) -> Callable:
    """
    Decorator that logs failures of an operation and re-raises them.

    Expected rejections (CitationError subclasses) are logged as warnings,
    anything else as an error with traceback.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            try:
                return func(*args, **kwargs)
            except CitationError as e:
                logger.warning(f"{operation} rejected in {func.__name__}: {e}")
                raise
            except Exception as e:
                logger.error(f"{operation} error in {func.__name__}: {e}", exc_info=True)
                raise
        return wrapper
    return decorator
