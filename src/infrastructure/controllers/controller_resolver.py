"""Controller module resolver.

Imports controller modules named by the ``x-controller`` path extension and
looks up one handler per operationId. Modules are imported on first
reference and cached by module name; every operation that references the
same module shares the same module object.

Module names are relative to the configured controllers package. A "/" in
the name is read as a package separator, so ``x-controller: admin/users``
imports ``<package>.admin.users``.

Implementation intentionally does NOT inherit from ControllerResolverProtocol.

Usage:
    resolver = ControllerResolver("controllers")
    handler = resolver.resolve("items", "getItem")
"""

import importlib
from collections.abc import Mapping
from types import MappingProxyType, ModuleType

from src.core.enums import ErrorCode
from src.core.errors import MissingOperationHandler
from src.domain.protocols import Handler


class ControllerResolver:
    """Resolve and memoize controller modules for one application.

    The cache is written only while routes are synthesized at startup.

    Args:
        package: Importable package holding controller modules ("" for
            top-level modules).
    """

    def __init__(self, package: str) -> None:
        self._package = package.strip(".")
        self._modules: dict[str, ModuleType] = {}

    @property
    def loaded_modules(self) -> Mapping[str, ModuleType]:
        """Read-only view of the modules imported so far, by module name."""
        return MappingProxyType(self._modules)

    def resolve(self, module_name: str | None, operation_id: str) -> Handler:
        """Return the handler exported as ``operation_id`` by ``module_name``.

        Args:
            module_name: Controller module referenced by the path entry.
            operation_id: Export name to look up.

        Returns:
            Callable handler.

        Raises:
            MissingOperationHandler: If the module is undeclared or cannot be
                found, or has no callable export with that name.
        """
        if not module_name:
            raise MissingOperationHandler(
                code=ErrorCode.CONTROLLER_NOT_DECLARED,
                message=f"Operation '{operation_id}' has no x-controller on its path",
                details={"operation_id": operation_id},
            )

        module = self._load(module_name)
        handler = getattr(module, operation_id, None)

        if handler is None:
            raise MissingOperationHandler(
                code=ErrorCode.OPERATION_HANDLER_NOT_FOUND,
                message=f"Controller '{module_name}' has no export '{operation_id}'",
                details={"controller": module_name, "operation_id": operation_id},
            )
        if not callable(handler):
            raise MissingOperationHandler(
                code=ErrorCode.OPERATION_HANDLER_NOT_CALLABLE,
                message=f"Export '{operation_id}' of controller '{module_name}' is not callable",
                details={"controller": module_name, "operation_id": operation_id},
            )

        return handler

    def _load(self, module_name: str) -> ModuleType:
        module = self._modules.get(module_name)
        if module is not None:
            return module

        qualified_name = self._qualify(module_name)
        try:
            module = importlib.import_module(qualified_name)
        except ModuleNotFoundError as exc:
            # Only a missing controller is ours; a missing import inside an
            # existing controller propagates unchanged.
            if exc.name is None or not (
                qualified_name == exc.name or qualified_name.startswith(exc.name + ".")
            ):
                raise
            raise MissingOperationHandler(
                code=ErrorCode.CONTROLLER_MODULE_NOT_FOUND,
                message=f"Controller module '{qualified_name}' not found",
                details={"controller": module_name, "module": qualified_name},
            ) from exc

        self._modules[module_name] = module
        return module

    def _qualify(self, module_name: str) -> str:
        relative = module_name.strip("/").replace("/", ".")
        if relative.endswith(".py"):
            relative = relative[: -len(".py")]
        return f"{self._package}.{relative}" if self._package else relative
