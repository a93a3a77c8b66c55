"""OpenAPI document schemas.

Pydantic models for the parts of an OpenAPI 3 document that route synthesis
reads, plus the validated ApiDocument handed to the route generator.

Usage:
    from src.schemas import ApiDocument, OperationSchema
"""

from src.schemas.openapi_schemas import (
    ApiDocument,
    InfoSchema,
    MediaTypeSchema,
    OpenAPIDocumentSchema,
    OperationSchema,
    ParameterSchema,
    PathItemSchema,
    RequestBodySchema,
    ResponseSchema,
    ServerSchema,
    ServerVariableSchema,
)

__all__ = [
    "ApiDocument",
    "InfoSchema",
    "MediaTypeSchema",
    "OpenAPIDocumentSchema",
    "OperationSchema",
    "ParameterSchema",
    "PathItemSchema",
    "RequestBodySchema",
    "ResponseSchema",
    "ServerSchema",
    "ServerVariableSchema",
]
