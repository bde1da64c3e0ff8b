"""
Helpers shared by every JSON view: the response envelope, request body
parsing, pagination and the ``api_view`` decorator that maps service errors
to HTTP status codes.
"""
import json
import logging
from decimal import Decimal
from functools import wraps

from django.core.paginator import Paginator
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt

from .exceptions import ServiceError, ValidationError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error. Please try again later."


def _envelope(success, message, status, **extra):
    body = {"success": success, "message": message}
    body.update(extra)
    body["timestamp"] = timezone.now().isoformat()
    body["statusCode"] = status
    return JsonResponse(body, status=status)


def success_response(data, message, status=200):
    return _envelope(True, message, status, data=data)


def validation_error_response(errors):
    return _envelope(False, "Validation failed", 400, errors=list(errors))


def error_response(message, status):
    return _envelope(False, message, status)


def as_number(value):
    """Render a Decimal as an int when it is whole, otherwise as a float."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    return value


def parse_json_body(request):
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Invalid JSON payload.")
    if not isinstance(payload, dict):
        raise ValidationError("JSON payload must be an object.")
    return payload


def parse_int(value, name, default=None):
    if value in (None, ""):
        if default is None:
            raise ValidationError(f"{name} is required")
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a valid number")


def paginate(queryset, page, limit):
    """
    Slice a queryset the way list endpoints report it.

    Returns:
        tuple: (objects on the page, pagination dict)
    """
    page = max(page, 1)
    limit = max(limit, 1)
    paginator = Paginator(queryset, limit)
    total = paginator.count
    # Out-of-range pages come back empty rather than clamped
    offset = (page - 1) * limit
    objects = list(queryset[offset:offset + limit]) if offset < total else []
    total_pages = paginator.num_pages if total else 0
    return objects, {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages,
        "hasNext": page < total_pages,
        "hasPrevious": page > 1,
    }


def api_view(view_func):
    """Decorator for JSON endpoints: exempt from CSRF, map service errors to responses."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except ValidationError as e:
            logger.info("Validation failed in %s: %s", view_func.__name__, e.errors)
            return validation_error_response(e.errors)
        except ServiceError as e:
            logger.warning("%s in %s: %s", type(e).__name__, view_func.__name__, e.message)
            return error_response(e.message, e.status_code)
        except Exception:
            logger.exception("Unhandled error in %s", view_func.__name__)
            return error_response(GENERIC_ERROR_MESSAGE, 500)

    return csrf_exempt(wrapper)


def method_not_allowed(request):
    return error_response(f"Method {request.method} not allowed for this endpoint", 405)
