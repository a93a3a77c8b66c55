"""Route metadata types for OpenAPI route synthesis.

Core types:
    DerivedSchema: Per-operation validation schema split by input location
    RouteRecord: Complete route specification submitted to the router
    Authenticator: Security scheme callable type

Usage:
    from src.presentation.routers.api.routes.metadata import RouteRecord

    record = RouteRecord(
        method=HTTPMethod.GET,
        path="/api/v1/items/{id:str}",
        operation_id="getItem",
        handler=get_item,
        schema=DerivedSchema(params={"type": "object", "properties": {...}}),
    )
"""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from starlette.requests import Request

from src.core.enums import HTTPMethod
from src.domain.protocols import Handler

CONTENT_TYPE_APPLICATION_JSON = "application/json"
CONTENT_TYPE_MULTIPART_FORM_DATA = "multipart/form-data"

# Security scheme name -> async (request) -> auth context
Authenticator = Callable[[Request], Awaitable[Any]]
SecurityRegistry = Mapping[str, Authenticator]


# =============================================================================
# Derived Schema
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class DerivedSchema:
    """Validation schema of one operation, split by input location.

    Every part is optional; a part is None when the operation declares
    nothing for it.

    Attributes:
        querystring: Query parameter name -> JSON schema.
        params: ``{"type": "object", "properties": {name: schema}}`` for path
            parameters.
        body: JSON schema of an ``application/json`` request body.
        response: Status code -> JSON schema of the JSON response.
        multipart: Schema of a ``multipart/form-data`` request body. Transient:
            it locates the upload field and is stripped before the schema is
            attached to a route.
        required_query: Query parameters declared ``required: true``.
        body_required: Whether the request body is declared required; an
            absent optional body skips body validation.
    """

    querystring: dict[str, Any] | None = None
    params: dict[str, Any] | None = None
    body: dict[str, Any] | None = None
    response: dict[str, Any] | None = None
    multipart: dict[str, Any] | None = None
    required_query: tuple[str, ...] = ()
    body_required: bool = False

    def without_multipart(self) -> "DerivedSchema":
        """Return a copy with the multipart part removed."""
        return replace(self, multipart=None)

    def as_route_schema(self) -> dict[str, Any]:
        """Return the schema as attached to the route (never has multipart).

        Returns:
            Dict with only the non-empty keys among querystring, params, body
            and response.

        Example:
            >>> DerivedSchema(response={"200": {"type": "object"}}).as_route_schema()
            {'response': {'200': {'type': 'object'}}}
        """
        parts = {
            "querystring": self.querystring,
            "params": self.params,
            "body": self.body,
            "response": self.response,
        }
        return {key: value for key, value in parts.items() if value is not None}


# =============================================================================
# Route Record
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class RouteRecord:
    """Complete specification of one synthesized route.

    Identity fields:
        method: HTTP method
        path: Absolute path (server prefix + rewritten template)
        operation_id: Document name of the operation

    Behavior:
        handler: Controller export invoked with the request
        schema: DerivedSchema without its multipart part
        security_scheme: Scheme whose authenticator runs before validation
            (None: no authenticator)
        upload_field: Form field bound to the upload pre-handler (None: no
            upload)
    """

    method: HTTPMethod
    path: str
    operation_id: str
    handler: Handler
    schema: DerivedSchema
    security_scheme: str | None = None
    upload_field: str | None = None
