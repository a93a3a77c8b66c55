"""Core shared kernel.

Configuration, enums, startup errors and the dependency container used by the
infrastructure and presentation layers. The core module has NO dependencies
on other application layers.
"""

from src.core.enums import Environment, ErrorCode
from src.core.errors import (
    InvalidMultipartSchema,
    MissingOperationHandler,
    RouterStartupError,
    SpecValidationError,
    UndeclaredPathParameter,
)

__all__ = [
    "Environment",
    "ErrorCode",
    "InvalidMultipartSchema",
    "MissingOperationHandler",
    "RouterStartupError",
    "SpecValidationError",
    "UndeclaredPathParameter",
]
