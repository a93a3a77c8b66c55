"""Domain protocols (ports) package.

Infrastructure adapters implement these protocols without inheritance.

Usage:
    from src.domain.protocols import ControllerResolverProtocol, LoggerProtocol
"""

from src.domain.protocols.controller_resolver_protocol import (
    ControllerResolverProtocol,
    Handler,
)
from src.domain.protocols.logger_protocol import LoggerProtocol

__all__ = [
    "ControllerResolverProtocol",
    "Handler",
    "LoggerProtocol",
]
