"""OpenAPI 3 document schemas.

Pydantic models for the subset of an OpenAPI 3 document that route synthesis
reads. Models are frozen and ignore fields they do not consume, so a full
document validates as long as the consumed fields have the right shape.

Field names follow Python conventions; aliases carry the document spelling
(``operationId``, ``in``, ``requestBody``, ``x-controller``).

Usage:
    from src.schemas.openapi_schemas import OpenAPIDocumentSchema

    model = OpenAPIDocumentSchema.model_validate(dereferenced_document)
    for path, path_item in model.paths.items():
        for method, operation in path_item.operations():
            ...
"""

from collections.abc import Iterator, Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.enums import SUPPORTED_METHODS, HTTPMethod

JsonSchema = dict[str, Any]


class _DocumentModel(BaseModel):
    """Base for document models: frozen, alias-aware, tolerant of extras."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class ParameterSchema(_DocumentModel):
    """Operation or path-level parameter.

    Attributes:
        name: Parameter name (query key or path placeholder).
        location: Where the value comes from (``in``).
        required: Whether the parameter is mandatory.
        schema_: JSON schema of the value; parameters without one are ignored.
    """

    name: str
    location: Literal["query", "header", "path", "cookie"] = Field(alias="in")
    required: bool = False
    schema_: JsonSchema | None = Field(default=None, alias="schema")


class MediaTypeSchema(_DocumentModel):
    """Content entry of a request body or response."""

    schema_: JsonSchema | None = Field(default=None, alias="schema")


class RequestBodySchema(_DocumentModel):
    """Request body keyed by content type."""

    required: bool = False
    content: dict[str, MediaTypeSchema] = Field(default_factory=dict)


class ResponseSchema(_DocumentModel):
    """Single response keyed by content type."""

    description: str | None = None
    content: dict[str, MediaTypeSchema] = Field(default_factory=dict)


class OperationSchema(_DocumentModel):
    """One HTTP method on one path.

    Attributes:
        operation_id: Name binding the operation to a controller export.
        summary: Optional short description (used in logs only).
        parameters: Ordered parameter declarations.
        request_body: Optional request body keyed by content type.
        responses: Status code (as string) to response mapping.
        security: Ordered alternative security requirements; each requirement
            maps scheme names to scopes.
    """

    operation_id: str | None = Field(default=None, alias="operationId")
    summary: str | None = None
    parameters: tuple[ParameterSchema, ...] = ()
    request_body: RequestBodySchema | None = Field(default=None, alias="requestBody")
    responses: dict[str, ResponseSchema] = Field(default_factory=dict)
    security: tuple[dict[str, list[str]], ...] | None = None

    @field_validator("responses", mode="before")
    @classmethod
    def stringify_status_codes(cls, v: Any) -> Any:
        """
        Convert status code keys to strings.

        YAML reads ``200:`` as an integer key.

        Args:
            v: Raw responses mapping.

        Returns:
            Mapping with string keys (other values passed through).
        """
        if isinstance(v, Mapping):
            return {str(code): response for code, response in v.items()}
        return v


class PathItemSchema(_DocumentModel):
    """Operations on one path template plus the controller module reference.

    Attributes:
        controller: Module name from the ``x-controller`` extension.
        parameters: Parameters shared by every operation on this path.
    """

    controller: str | None = Field(default=None, alias="x-controller")
    parameters: tuple[ParameterSchema, ...] = ()
    get: OperationSchema | None = None
    patch: OperationSchema | None = None
    post: OperationSchema | None = None
    put: OperationSchema | None = None
    delete: OperationSchema | None = None

    def operations(self) -> Iterator[tuple[HTTPMethod, OperationSchema]]:
        """Yield declared operations in registration order.

        Yields:
            (method, operation) pairs for supported methods that are declared.
        """
        for method in SUPPORTED_METHODS:
            operation = getattr(self, method.value.lower())
            if operation is not None:
                yield method, operation


class InfoSchema(_DocumentModel):
    """Document metadata."""

    title: str
    version: str


class ServerVariableSchema(_DocumentModel):
    """Server URL template variable."""

    default: str


class ServerSchema(_DocumentModel):
    """Server entry; the first one supplies the route prefix."""

    url: str
    variables: dict[str, ServerVariableSchema] = Field(default_factory=dict)


class OpenAPIDocumentSchema(_DocumentModel):
    """Dereferenced OpenAPI 3 document."""

    openapi: str
    info: InfoSchema
    servers: tuple[ServerSchema, ...] = ()
    paths: dict[str, PathItemSchema]

    @field_validator("openapi")
    @classmethod
    def validate_openapi_version(cls, v: str) -> str:
        """
        Accept OpenAPI 3.x documents only.

        Args:
            v: Value of the ``openapi`` field.

        Returns:
            str: The version string.

        Raises:
            ValueError: If the document is not OpenAPI 3.
        """
        if not v.startswith("3."):
            raise ValueError(f"Only OpenAPI 3.x documents are supported, got {v!r}")
        return v


class ApiDocument(_DocumentModel):
    """Validated document handed to route synthesis.

    Attributes:
        title: ``info.title``.
        version: ``info.version``.
        base_path: Route prefix taken from the first server entry ("" if none).
        paths: Path template to path item, in document order.
        raw: The document as read from disk (before dereferencing), served to
            the documentation UI.
    """

    title: str
    version: str
    base_path: str
    paths: dict[str, PathItemSchema]
    raw: dict[str, Any]
