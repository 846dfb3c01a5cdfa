"""
Request middleware: JWT Bearer authentication and per-IP rate limiting
"""
import logging

import jwt
from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.core.cache import cache
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

from core.models import TokenBlacklist
from core.utils import bearer_token, client_ip, decode_token

User = get_user_model()

logger = logging.getLogger(__name__)


class JWTAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware to authenticate requests using JWT Bearer tokens.
    Extracts token from Authorization header: "Bearer <token>"
    and attaches authenticated user to request.user

    Features:
        - Validates JWT access tokens
        - Rejects logged-out (blacklisted) tokens
        - Works alongside Django session authentication
        - Provides detailed error messages via request.jwt_error
    """

    def process_request(self, request):
        token = bearer_token(request)
        if not token:
            # Django's session auth middleware handles authentication
            return

        if TokenBlacklist.is_blacklisted(token):
            self._reject(request, 'Token has been logged out')
            return

        try:
            payload = decode_token(token)
        except jwt.ExpiredSignatureError:
            self._reject(request, 'Token has expired')
            return
        except jwt.InvalidTokenError as e:
            self._reject(request, f'Invalid token: {str(e)}')
            return

        # Refresh tokens cannot be used to call the API
        if payload.get('type') != 'access':
            self._reject(request, 'Invalid token type. Expected access token.')
            return

        user_id = payload.get('user_id')
        if not user_id:
            self._reject(request, 'No user_id in token payload')
            return

        user = User.objects.select_related(
            'school',
            'enrollment'
        ).filter(id=user_id, is_active=True).first()

        if user is None:
            self._reject(request, 'User not found or inactive')
            return

        request.user = user
        request.jwt_payload = payload

    @staticmethod
    def _reject(request, reason):
        logger.debug("JWT rejected: %s", reason)
        request.user = AnonymousUser()
        request.jwt_error = reason


class RateLimitMiddleware(MiddlewareMixin):
    """
    Fixed-window request counter per client IP.

    Counters live in the Django cache, so every instance behind a load
    balancer shares them when the cache is Redis.
    """

    def process_request(self, request):
        if not getattr(settings, 'RATE_LIMIT_ENABLED', True):
            return None

        limit = settings.RATE_LIMIT_REQUESTS
        window = settings.RATE_LIMIT_WINDOW_SECONDS
        key = f"ratelimit:{client_ip(request)}"

        # add() only sets the key when it is absent, which starts a new window
        cache.add(key, 0, timeout=window)
        try:
            count = cache.incr(key)
        except ValueError:
            # Window expired between add() and incr()
            cache.set(key, 1, timeout=window)
            count = 1

        if count > limit:
            logger.warning("Rate limit exceeded for %s", client_ip(request))
            return JsonResponse(
                {"error": "Too Many Requests - Rate limit exceeded"},
                status=429
            )
        return None
