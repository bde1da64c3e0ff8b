import logging

from django.contrib.auth import authenticate
from django.db import connection
from django.views.decorators.http import require_GET, require_POST

from .auth import create_token
from .exceptions import AuthenticationError, ValidationError
from .http import api_view, error_response, parse_json_body, success_response

logger = logging.getLogger(__name__)


@require_GET
def root(request):
    return success_response({"service": "ecommerce-backoffice"}, "Back office API running")


@require_GET
def health(request):
    """Report whether the database answers a trivial query."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except Exception:
        logger.exception("Health check failed")
        return error_response("Database not available", 503)
    return success_response({"backend": "running", "database": "connected"}, "Service healthy")


@require_POST
@api_view
def obtain_token(request):
    payload = parse_json_body(request)
    username = payload.get("username")
    password = payload.get("password")
    if not username or not password:
        raise ValidationError("username and password are required")

    user = authenticate(request, username=username, password=password)
    if user is None:
        raise AuthenticationError("Invalid credentials")
    if not user.is_staff:
        raise AuthenticationError("Access denied. Staff privileges required.")

    logger.info("Issued token for %s", user.get_username())
    return success_response({"token": create_token(user)}, "Authenticated successfully")
