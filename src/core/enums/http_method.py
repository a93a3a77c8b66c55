"""HTTP methods routed from an OpenAPI document.

Only the methods below are turned into routes; ``head``, ``options`` and
``trace`` operations in a document are ignored.
"""

from enum import Enum


class HTTPMethod(str, Enum):
    """HTTP methods for generated routes.

    Attributes:
        GET: Safe, idempotent read operations
        PATCH: Partial update
        POST: Create operations, uploads
        PUT: Complete replacement
        DELETE: Delete operations
    """

    GET = "GET"
    PATCH = "PATCH"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


# Registration order within one path entry
SUPPORTED_METHODS: tuple[HTTPMethod, ...] = (
    HTTPMethod.GET,
    HTTPMethod.PATCH,
    HTTPMethod.POST,
    HTTPMethod.PUT,
    HTTPMethod.DELETE,
)
