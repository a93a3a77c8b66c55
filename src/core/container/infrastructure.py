"""Infrastructure dependency factories.

Composition root for the adapters the router needs:
- Logging (structlog console adapter)
- Controller resolution (importlib-backed resolver)

The default logger is an application-scoped singleton built from
get_settings(). Applications created with explicit settings get their own
logger from create_logger(). Controller resolvers are created per
application so their module cache never outlives the app that registered
the routes.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import Settings, get_settings

if TYPE_CHECKING:
    from src.domain.protocols.controller_resolver_protocol import (
        ControllerResolverProtocol,
    )
    from src.domain.protocols.logger_protocol import LoggerProtocol


# ============================================================================
# Logging (Application-Scoped)
# ============================================================================


def create_logger(settings: Settings) -> "LoggerProtocol":
    """Build a logger for the given settings.

    Adapter selection is centralized here (composition root):
    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)

    Args:
        settings: Settings providing environment and log level.

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    return ConsoleAdapter(use_json=settings.uses_json_logs, level=settings.log_level)


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Returns:
        LoggerProtocol: Logger built from the cached settings.
    """
    return create_logger(get_settings())


# ============================================================================
# Controllers (Application-Scoped, not cached)
# ============================================================================


def get_controller_resolver(package: str) -> "ControllerResolverProtocol":
    """Create a controller resolver for one application.

    Args:
        package: Importable package holding the x-controller modules.

    Returns:
        ControllerResolverProtocol: Fresh resolver with an empty module cache.
    """
    from src.infrastructure.controllers.controller_resolver import ControllerResolver

    return ControllerResolver(package)
