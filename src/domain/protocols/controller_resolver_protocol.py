"""ControllerResolverProtocol: bind operationIds to handler functions.

A controller is a module exporting one function per operationId. Route
synthesis asks the resolver for the handler of each operation; failures are
typed (MissingOperationHandler) so a route can never be registered without a
call target.

Usage:
    from src.domain.protocols import ControllerResolverProtocol

    def build(resolver: ControllerResolverProtocol) -> None:
        handler = resolver.resolve("items", "getItem")
"""

from collections.abc import Awaitable, Callable, Mapping
from types import ModuleType
from typing import Any, Protocol

# Handlers receive the request and return a JSON-serializable value
# (coroutine functions are awaited).
Handler = Callable[..., Awaitable[Any] | Any]


class ControllerResolverProtocol(Protocol):
    """Protocol for controller module resolution."""

    @property
    def loaded_modules(self) -> Mapping[str, ModuleType]:
        """Controller modules imported so far, by module name."""
        ...

    def resolve(self, module_name: str | None, operation_id: str) -> Handler:
        """Return the handler exported as ``operation_id`` by ``module_name``.

        Args:
            module_name: Controller module referenced by the path entry.
            operation_id: Export name to look up.

        Returns:
            Callable handler.

        Raises:
            MissingOperationHandler: If the module is undeclared or missing,
                or has no callable export with that name.
        """
        ...
