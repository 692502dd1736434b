class DomainError(Exception):
    """Base for business rule violations.

    ``status_code`` is what the JSON API answers with when the error escapes a
    controller.
    """

    status_code = 400


class ValidationError(DomainError):
    """Input is malformed or breaks a business rule."""


class NotFoundError(DomainError):
    status_code = 404


class AuthenticationError(DomainError):
    """Bad credentials or inactive account."""

    status_code = 401


class AuthorizationError(DomainError):
    """The signed-in role may not perform this action."""

    status_code = 403
