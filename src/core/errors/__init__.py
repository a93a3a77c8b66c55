"""Core errors package.

Usage:
    from src.core.errors import SpecValidationError, MissingOperationHandler
"""

from src.core.errors.startup_errors import (
    InvalidMultipartSchema,
    MissingOperationHandler,
    RouterStartupError,
    SpecValidationError,
    UndeclaredPathParameter,
)

__all__ = [
    "InvalidMultipartSchema",
    "MissingOperationHandler",
    "RouterStartupError",
    "SpecValidationError",
    "UndeclaredPathParameter",
]
