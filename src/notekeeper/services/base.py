"""Error wrapping shared by all domain actions."""
import functools
import logging

from notekeeper.exceptions import BaseAPIException, ActionFailed

logger = logging.getLogger(__name__)


def action(failure_message: str):
    """
    Wrap a service coroutine so callers only ever see action-level errors.

    Errors that already are ``BaseAPIException`` (not found, validation,
    database unavailable) pass through unchanged. Anything else is logged
    with its traceback and replaced by ``ActionFailed(failure_message)``.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except BaseAPIException:
                raise
            except Exception as e:
                logger.exception(f"{func.__qualname__} failed: {e}")
                raise ActionFailed(failure_message) from e
        return wrapper
    return decorator
