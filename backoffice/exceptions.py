"""
Error taxonomy shared by the services and the HTTP layer.

Services raise these; ``backoffice.http.api_view`` turns them into
responses. Anything that is not a ``ServiceError`` is treated as an
infrastructure failure and answered with a generic 500.
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Client-caused problem with the request; carries one or more reasons."""

    status_code = 400

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = list(errors) if errors else [message]


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class AuthenticationError(ServiceError):
    status_code = 401


# Purchase request validation

class EmptyCart(ValidationError):
    pass


class InvalidEmail(ValidationError):
    pass


class InvalidName(ValidationError):
    pass


class InvalidIdentification(ValidationError):
    pass


class InvalidContact(ValidationError):
    pass


# Cart validation

class InvalidQuantity(ValidationError):
    pass


class ProductNotFound(ValidationError):
    pass


class ProductUnavailable(ValidationError):
    pass


class ColorNotAvailable(ValidationError):
    pass
