"""Derive route artifacts from OpenAPI operations.

Pure functions used by the route generator, one per concern:

    rewrite_path: OpenAPI path template -> Starlette path syntax
    derive_schema: operation -> DerivedSchema (query/path/body/response/multipart)
    extract_upload_field: multipart schema -> upload field name
    resolve_security_scheme: security requirements -> authenticator scheme name

None of these functions touch the router or perform I/O.
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from src.core.enums import ErrorCode
from src.core.errors import InvalidMultipartSchema
from src.presentation.routers.api.routes.metadata import (
    CONTENT_TYPE_APPLICATION_JSON,
    CONTENT_TYPE_MULTIPART_FORM_DATA,
    DerivedSchema,
)
from src.schemas.openapi_schemas import OperationSchema, ParameterSchema

_PLACEHOLDER = re.compile(r"{(\w+)}")


# =============================================================================
# Path Rewriting
# =============================================================================


def path_placeholders(template: str) -> list[str]:
    """Return placeholder names of a path template in order.

    Example:
        >>> path_placeholders("/users/{user_id}/items/{item_id}")
        ['user_id', 'item_id']
    """
    return _PLACEHOLDER.findall(template)


def rewrite_path(template: str) -> str:
    """Rewrite ``{name}`` placeholders into Starlette's ``{name:str}`` syntax.

    Every placeholder is matched as a plain string segment; type checks are
    left to request validation so a mistyped value is a 400, not a 404.
    All other characters and the placeholder order are preserved.

    Example:
        >>> rewrite_path("/items/{id}/tags/{tag}")
        '/items/{id:str}/tags/{tag:str}'
        >>> rewrite_path("/health")
        '/health'
    """
    return _PLACEHOLDER.sub(lambda match: "{%s:str}" % match.group(1), template)


# =============================================================================
# Schema Derivation
# =============================================================================


def _merge_parameters(
    shared: Sequence[ParameterSchema],
    own: Sequence[ParameterSchema],
) -> list[ParameterSchema]:
    """Path-level parameters first; an operation parameter with the same
    name and location overrides the shared one."""
    overridden = {(parameter.name, parameter.location) for parameter in own}
    inherited = [
        parameter
        for parameter in shared
        if (parameter.name, parameter.location) not in overridden
    ]
    return [*inherited, *own]


def derive_schema(
    operation: OperationSchema,
    shared_parameters: Sequence[ParameterSchema] = (),
) -> DerivedSchema:
    """Derive the validation schema of one operation.

    Args:
        operation: Operation from the document.
        shared_parameters: Parameters declared on the path item.

    Returns:
        DerivedSchema with only the parts the operation declares. Query
        parameters map name to schema; path parameters form an object schema;
        a JSON request body becomes ``body``; a multipart body is captured in
        ``multipart`` (never merged into ``body``); JSON responses are keyed
        by status code.

    Example:
        >>> schema = derive_schema(operation)  # GET /items/{id}, id: string
        >>> schema.params
        {'type': 'object', 'properties': {'id': {'type': 'string'}}}
    """
    querystring: dict[str, Any] | None = None
    params: dict[str, Any] | None = None
    body: dict[str, Any] | None = None
    multipart: dict[str, Any] | None = None
    response: dict[str, Any] | None = None
    required_query: list[str] = []

    for parameter in _merge_parameters(shared_parameters, operation.parameters):
        if parameter.schema_ is None:
            continue
        if parameter.location == "query":
            if querystring is None:
                querystring = {}
            querystring[parameter.name] = parameter.schema_
            if parameter.required:
                required_query.append(parameter.name)
        elif parameter.location == "path":
            if params is None:
                params = {"type": "object", "properties": {}}
            params["properties"][parameter.name] = parameter.schema_

    if operation.request_body is not None:
        for content_type, media in operation.request_body.content.items():
            if media.schema_ is None:
                continue
            if content_type == CONTENT_TYPE_APPLICATION_JSON:
                body = media.schema_
            elif content_type == CONTENT_TYPE_MULTIPART_FORM_DATA:
                multipart = media.schema_

    for status_code, declared in operation.responses.items():
        media = declared.content.get(CONTENT_TYPE_APPLICATION_JSON)
        if media is not None and media.schema_ is not None:
            if response is None:
                response = {}
            response[status_code] = media.schema_

    return DerivedSchema(
        querystring=querystring,
        params=params,
        body=body,
        response=response,
        multipart=multipart,
        required_query=tuple(required_query),
        body_required=(
            operation.request_body is not None and operation.request_body.required
        ),
    )


# =============================================================================
# Multipart Upload Field
# =============================================================================


def extract_upload_field(multipart_schema: Mapping[str, Any]) -> str:
    """Return the upload field name of a multipart request body schema.

    The schema must declare exactly one property, and that property must
    carry both ``type`` and ``format`` (string/binary or string/base64).

    Args:
        multipart_schema: Schema of the ``multipart/form-data`` body.

    Returns:
        The single property name.

    Raises:
        InvalidMultipartSchema: If the schema cannot describe a single file.

    Example:
        >>> extract_upload_field(
        ...     {"type": "object",
        ...      "properties": {"upload": {"type": "string", "format": "binary"}}}
        ... )
        'upload'
    """
    properties = multipart_schema.get("properties") or {}
    if len(properties) != 1:
        raise InvalidMultipartSchema(
            code=ErrorCode.MULTIPART_PROPERTY_COUNT,
            message=(
                "Multipart request body must declare exactly one property, "
                f"found {len(properties)}"
            ),
            details={"properties": sorted(properties)},
        )

    field_name, field_schema = next(iter(properties.items()))
    if not isinstance(field_schema, Mapping) or "type" not in field_schema:
        raise InvalidMultipartSchema(
            code=ErrorCode.MULTIPART_PROPERTY_TYPE_MISSING,
            message=f"Upload field '{field_name}' must declare a type (string)",
            details={"field": field_name},
        )
    if "format" not in field_schema:
        raise InvalidMultipartSchema(
            code=ErrorCode.MULTIPART_PROPERTY_FORMAT_MISSING,
            message=f"Upload field '{field_name}' must declare a format (binary or base64)",
            details={"field": field_name},
        )

    return field_name


# =============================================================================
# Security
# =============================================================================


def resolve_security_scheme(
    requirements: Sequence[Mapping[str, Iterable[str]]] | None,
    registry: Mapping[str, Any],
) -> str | None:
    """Pick the scheme whose authenticator guards an operation.

    Only the first requirement is consulted, and only its first scheme name:
    it is used when the registry has an authenticator for it. Later
    alternatives never apply, so a document listing ``[{apiKey}, {bearer}]``
    with only ``bearer`` configured gets no authenticator.

    Args:
        requirements: Operation's ``security`` list (None: not declared).
        registry: Configured authenticators by scheme name.

    Returns:
        Scheme name, or None when no authenticator applies.
    """
    if not requirements:
        return None

    scheme_names = list(requirements[0])
    if scheme_names and scheme_names[0] in registry:
        return scheme_names[0]
    return None
