"""Core enums package.

Usage:
    from src.core.enums import ErrorCode, Environment, HTTPMethod
"""

from src.core.enums.environment import Environment
from src.core.enums.error_code import ErrorCode
from src.core.enums.http_method import SUPPORTED_METHODS, HTTPMethod

__all__ = ["Environment", "ErrorCode", "HTTPMethod", "SUPPORTED_METHODS"]
