"""Request middlewares and auth dependencies."""
from .auth import (
    AccessGateMiddleware,
    get_current_user_id,
    resolve_user_id,
)

__all__ = [
    "AccessGateMiddleware",
    "get_current_user_id",
    "resolve_user_id",
]
