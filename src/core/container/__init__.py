"""Container module - Centralized dependency injection.

Usage:
    from src.core.container import get_logger, get_controller_resolver
"""

from src.core.container.infrastructure import (
    create_logger,
    get_controller_resolver,
    get_logger,
)

__all__ = [
    "create_logger",
    "get_controller_resolver",
    "get_logger",
]
