"""
JWT helpers shared by the GraphQL auth mutations, REST views and middleware
"""
from datetime import datetime, timedelta, timezone as dt_timezone

import jwt
from django.conf import settings


def _now():
    return datetime.now(dt_timezone.utc)


def generate_access_token(user):
    now = _now()
    payload = {
        'user_id': user.id,
        'email': user.email,
        'role': user.role,
        'school_id': user.school_id,
        'exp': now + timedelta(hours=settings.JWT_ACCESS_TOKEN_LIFETIME_HOURS),
        'iat': now,
        'type': 'access'
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def generate_refresh_token(user):
    now = _now()
    payload = {
        'user_id': user.id,
        'exp': now + timedelta(days=settings.JWT_REFRESH_TOKEN_LIFETIME_DAYS),
        'iat': now,
        'type': 'refresh'
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token):
    """
    Decode and verify a token signed by this service.
    Raises jwt.ExpiredSignatureError / jwt.InvalidTokenError.
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


def bearer_token(request):
    """Return the token from an ``Authorization: Bearer <token>`` header, if any"""
    auth_header = request.META.get('HTTP_AUTHORIZATION', '')
    if auth_header.startswith('Bearer '):
        return auth_header.split('Bearer ')[1].strip() or None
    return None


def client_ip(request):
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR', 'unknown')
