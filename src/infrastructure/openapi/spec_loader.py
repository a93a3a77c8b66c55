"""OpenAPI document loader.

Loads, dereferences and validates the API description before any route is
synthesized. Every failure is a SpecValidationError, which aborts startup:
the server never serves a contract it could not validate.

Checks performed:
    1. File is readable YAML/JSON and its root is a mapping
    2. Every ``$ref`` resolves (local or relative file), without cycles
    3. Document shape matches OpenAPIDocumentSchema (pydantic)
    4. Every embedded JSON schema is itself a valid schema (jsonschema)
    5. operationIds are unique across the document

Usage:
    from src.infrastructure.openapi import load_api_document

    document = load_api_document("openapi.yaml")
    document.base_path   # "/api/v1"
    document.paths       # {"/items/{id}": PathItemSchema(...), ...}
"""

import re
from collections import Counter
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import jsonschema
from jsonschema import Draft7Validator
from pydantic import ValidationError

from src.core.enums import ErrorCode
from src.core.errors import SpecValidationError
from src.infrastructure.openapi.ref_resolver import RefResolver, read_document
from src.schemas.openapi_schemas import (
    ApiDocument,
    OpenAPIDocumentSchema,
    ServerSchema,
)

_SERVER_VARIABLE = re.compile(r"{(\w+)}")


def load_api_document(file_path: str | Path) -> ApiDocument:
    """Load and validate the OpenAPI document at ``file_path``.

    Args:
        file_path: YAML or JSON document.

    Returns:
        Validated, dereferenced ApiDocument.

    Raises:
        SpecValidationError: If the document cannot be used to build routes.
    """
    path = Path(file_path)
    return parse_api_document(read_document(path), source=path)


def parse_api_document(raw: Any, *, source: Path) -> ApiDocument:
    """Validate an already parsed document.

    Args:
        raw: Parsed document.
        source: File the document came from (base for relative ``$ref``).

    Returns:
        Validated, dereferenced ApiDocument.

    Raises:
        SpecValidationError: If the document cannot be used to build routes.
    """
    if not isinstance(raw, dict):
        raise SpecValidationError(
            code=ErrorCode.SPEC_STRUCTURE_INVALID,
            message=f"OpenAPI document {source} must be a mapping at the top level",
            details={"file": str(source)},
        )

    dereferenced = RefResolver(source).dereference(raw)

    try:
        model = OpenAPIDocumentSchema.model_validate(dereferenced)
    except ValidationError as exc:
        raise SpecValidationError(
            code=ErrorCode.SPEC_STRUCTURE_INVALID,
            message=f"OpenAPI document {source} is invalid ({exc.error_count()} errors)",
            details={
                "file": str(source),
                "errors": [
                    {
                        "loc": ".".join(str(part) for part in error["loc"]),
                        "msg": error["msg"],
                    }
                    for error in exc.errors()
                ],
            },
        ) from exc

    _check_embedded_schemas(model)
    _check_unique_operation_ids(model)

    return ApiDocument(
        title=model.info.title,
        version=model.info.version,
        base_path=_base_path(model.servers),
        paths=model.paths,
        raw=raw,
    )


def _base_path(servers: tuple[ServerSchema, ...]) -> str:
    """Route prefix from the first server entry.

    Variables are replaced by their defaults and only the path component of
    an absolute URL is kept: "https://{host}/api/v1/" -> "/api/v1".
    """
    if not servers:
        return ""

    server = servers[0]

    def _substitute(match: re.Match[str]) -> str:
        variable = server.variables.get(match.group(1))
        return variable.default if variable else match.group(0)

    url = _SERVER_VARIABLE.sub(_substitute, server.url)
    path = urlsplit(url).path.rstrip("/")
    if path and not path.startswith("/"):
        path = "/" + path
    return path


def _embedded_schemas(model: OpenAPIDocumentSchema) -> Iterator[tuple[str, dict]]:
    """Yield (location, schema) for every schema route synthesis may use."""
    for template, path_item in model.paths.items():
        for parameter in path_item.parameters:
            if parameter.schema_ is not None:
                yield f"{template} parameter '{parameter.name}'", parameter.schema_

        for method, operation in path_item.operations():
            where = f"{method.value} {template}"
            for parameter in operation.parameters:
                if parameter.schema_ is not None:
                    yield f"{where} parameter '{parameter.name}'", parameter.schema_
            if operation.request_body is not None:
                for content_type, media in operation.request_body.content.items():
                    if media.schema_ is not None:
                        yield f"{where} request body '{content_type}'", media.schema_
            for status_code, response in operation.responses.items():
                for content_type, media in response.content.items():
                    if media.schema_ is not None:
                        yield f"{where} response {status_code} '{content_type}'", media.schema_


def _check_embedded_schemas(model: OpenAPIDocumentSchema) -> None:
    for location, schema in _embedded_schemas(model):
        try:
            Draft7Validator.check_schema(schema)
        except jsonschema.SchemaError as exc:
            raise SpecValidationError(
                code=ErrorCode.SPEC_SCHEMA_INVALID,
                message=f"Invalid JSON schema at {location}: {exc.message}",
                details={"location": location},
            ) from exc


def _check_unique_operation_ids(model: OpenAPIDocumentSchema) -> None:
    counts = Counter(
        operation.operation_id
        for path_item in model.paths.values()
        for _, operation in path_item.operations()
        if operation.operation_id
    )
    duplicates = sorted(operation_id for operation_id, count in counts.items() if count > 1)
    if duplicates:
        raise SpecValidationError(
            code=ErrorCode.SPEC_DUPLICATE_OPERATION_ID,
            message=f"Duplicate operationId values: {', '.join(duplicates)}",
            details={"operation_ids": duplicates},
        )
