"""Startup errors raised while turning an OpenAPI document into routes.

Every error in this module means the document promises something the server
cannot serve. They are raised (not returned) so that application creation
stops before a single request is accepted.

Error Types:
- SpecValidationError: Document unreadable, malformed, or structurally invalid
- MissingOperationHandler: operationId has no callable export in its controller
- InvalidMultipartSchema: Multipart body does not declare exactly one file field
- UndeclaredPathParameter: Path placeholder without a declared path parameter

Usage:
    from src.core.errors import MissingOperationHandler
    from src.core.enums import ErrorCode

    raise MissingOperationHandler(
        code=ErrorCode.OPERATION_HANDLER_NOT_FOUND,
        message="Controller 'items' has no export 'getItem'",
        details={"controller": "items", "operation_id": "getItem"},
    )
"""

from typing import Any

from src.core.enums import ErrorCode


class RouterStartupError(Exception):
    """Base class for failures that must abort startup.

    Attributes:
        code: Machine-readable error code (enum).
        message: Human-readable error message.
        details: Optional context for debugging (path, method, operation_id).
    """

    def __init__(
        self,
        *,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"


class SpecValidationError(RouterStartupError):
    """OpenAPI document failed to load, dereference, or validate."""


class MissingOperationHandler(RouterStartupError):
    """Operation cannot be bound to a handler function.

    Raised when the operation has no operationId, the path declares no
    controller module, the module cannot be imported, or the module has no
    callable export named after the operationId.
    """


class InvalidMultipartSchema(RouterStartupError):
    """Multipart request body is unserviceable.

    The schema must declare exactly one property, and that property must carry
    both ``type`` and ``format`` (e.g. string/binary).
    """


class UndeclaredPathParameter(RouterStartupError):
    """Path template has placeholders that no path parameter declares."""
