"""
Utility functions for GraphQL authentication and authorization
"""
from functools import wraps
from typing import Callable

from strawberry.types import Info

from core.exceptions import AuthenticationError


def is_authenticated(info: Info) -> bool:
    """
    Check if the user is authenticated

    Args:
        info: Strawberry Info object containing request context

    Returns:
        bool: True if user is authenticated, False otherwise
    """
    request = info.context.request
    return hasattr(request, 'user') and request.user.is_authenticated


def current_user(info: Info):
    """Authenticated user of the request, or None"""
    if not is_authenticated(info):
        return None
    return info.context.request.user


def _find_info(args, kwargs):
    for arg in args:
        if isinstance(arg, Info):
            return arg
    return kwargs.get('info')


def _authentication_error(info: Info) -> AuthenticationError:
    request = info.context.request
    jwt_error = getattr(request, 'jwt_error', None)
    if jwt_error:
        return AuthenticationError(f"Authentication failed: {jwt_error}")
    return AuthenticationError()


def require_auth(func: Callable) -> Callable:
    """
    Decorator to require authentication for GraphQL resolvers
    Raises AuthenticationError if user is not authenticated

    Usage:
        @strawberry.field
        @require_auth
        def my_query(self, info: Info) -> str:
            return "Authenticated"
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        info = _find_info(args, kwargs)
        if not info:
            raise RuntimeError("Authentication check requires Info parameter")

        if not is_authenticated(info):
            raise _authentication_error(info)

        return func(*args, **kwargs)

    return wrapper
