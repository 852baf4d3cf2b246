from .http import (
    AppError,
    ConflictError,
    InsufficientFundsError,
    InvalidCredentialsError,
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
    UnknownRoleError,
    ValidationError,
)

__all__ = [
    "AppError",
    "ConflictError",
    "InsufficientFundsError",
    "InvalidCredentialsError",
    "NotFoundError",
    "PermissionDeniedError",
    "UnauthorizedError",
    "UnknownRoleError",
    "ValidationError",
]
