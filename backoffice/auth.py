import logging
from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from django.conf import settings
from django.contrib.auth import get_user_model

from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def create_token(user):
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.pk),
        "username": user.get_username(),
        "email": user.email,
        "is_staff": user.is_staff,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_EXPIRES_MIN),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def decode_token(token):
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Unauthorized: Token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Unauthorized: Invalid token")


def get_token_user(request):
    """Resolve the staff user behind the request's Bearer token."""
    header = request.headers.get("Authorization", "")
    if not header:
        raise AuthenticationError("Unauthorized: Missing authorization header")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Unauthorized: Invalid authorization header")

    payload = decode_token(token.strip())
    user = get_user_model().objects.filter(pk=payload.get("sub"), is_active=True).first()
    if user is None or not user.is_staff:
        raise AuthenticationError("Unauthorized: User not allowed")
    return user


def token_required(view_func):
    """Decorator to require a valid staff token; use inside ``api_view``."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        request.token_user = get_token_user(request)
        logger.info("User authenticated: %s", request.token_user.get_username())
        return view_func(request, *args, **kwargs)

    return wrapper
