"""Controller module resolution."""

from src.infrastructure.controllers.controller_resolver import ControllerResolver

__all__ = ["ControllerResolver"]
