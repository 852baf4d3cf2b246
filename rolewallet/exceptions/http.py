"""
Typed error taxonomy shared by the service layer.

Every error carries a machine-readable ``code`` and the HTTP status the
presentation layer should map it to. Messages are deliberately generic where
detail would help credential or account enumeration.
"""


class AppError(Exception):
    """Base class for all errors raised by rolewallet services."""

    code: str = "APP_ERROR"
    status_code: int = 500

    def __init__(self, message: str | None = None):
        self.message = message or self.__class__.__doc__ or self.code
        super().__init__(self.message)


class NotFoundError(AppError):
    """The referenced account or record does not exist."""

    code = "NOT_FOUND"
    status_code = 404


class PermissionDeniedError(AppError):
    """The actor is not allowed to perform this action."""

    code = "PERMISSION_DENIED"
    status_code = 403


class InsufficientFundsError(AppError):
    """The paying account does not hold enough balance."""

    code = "INSUFFICIENT_FUNDS"
    status_code = 409


class ValidationError(AppError):
    """The request is malformed or missing required values."""

    code = "INVALID_INPUT"
    status_code = 422


class UnknownRoleError(ValidationError):
    """The role is not part of the role hierarchy."""

    code = "UNKNOWN_ROLE"

    def __init__(self, role: object):
        self.role = role
        super().__init__(f"Unknown role: {role!r}")


class UnauthorizedError(AppError):
    """No caller identity was supplied."""

    code = "UNAUTHORIZED"
    status_code = 401


class InvalidCredentialsError(UnauthorizedError):
    """Invalid credentials."""

    code = "INVALID_CREDENTIALS"


class ConflictError(AppError):
    """The request conflicts with the current state (duplicate or no-op)."""

    code = "CONFLICT"
    status_code = 409
