"""Route generator for OpenAPI documents.

This module provides register_routes_from_document(), which turns every
operation of a loaded ApiDocument into a FastAPI route at application
startup. Routes are registered in one sequential pass: paths in document
order, methods in the order get, patch, post, put, delete.

Functions:
    register_routes_from_document: Synthesize and register all routes
    build_route_record: Synthesize the RouteRecord of one operation
    _build_dependencies: Build FastAPI dependencies of one route

Usage:
    from fastapi import APIRouter
    from src.presentation.routers.api.routes.generator import (
        register_routes_from_document,
    )

    router = APIRouter()
    records = register_routes_from_document(
        router,
        document,
        resolver=ControllerResolver("controllers"),
        security={"bearerAuth": verify_bearer},
        logger=logger,
    )
"""

from typing import Any

from fastapi import APIRouter, Depends

from src.core.enums import ErrorCode, HTTPMethod
from src.core.errors import MissingOperationHandler, UndeclaredPathParameter
from src.domain.protocols import ControllerResolverProtocol, LoggerProtocol
from src.presentation.routers.api.routes.derivations import (
    derive_schema,
    extract_upload_field,
    path_placeholders,
    resolve_security_scheme,
    rewrite_path,
)
from src.presentation.routers.api.routes.metadata import RouteRecord, SecurityRegistry
from src.presentation.routers.api.routes.request_hooks import (
    build_auth_hook,
    build_endpoint,
    build_request_validator,
    build_upload_handler,
)
from src.presentation.routers.api.routes.validation import (
    RouteValidators,
    compile_validators,
)
from src.schemas.openapi_schemas import ApiDocument, OperationSchema, PathItemSchema


def register_routes_from_document(
    router: APIRouter,
    document: ApiDocument,
    *,
    resolver: ControllerResolverProtocol,
    security: SecurityRegistry,
    logger: LoggerProtocol,
    validate_responses: bool = True,
) -> list[RouteRecord]:
    """Generate FastAPI routes from an OpenAPI document.

    For each operation with an operationId: bind the controller handler,
    derive the validation schema, rewrite the path, pick the authenticator,
    extract the upload field, then register the route with
    router.add_api_route(). Operations without an operationId are skipped
    with a warning. Any startup error aborts the whole pass.

    Args:
        router: FastAPI APIRouter to register routes on
        document: Loaded and validated ApiDocument
        resolver: Controller resolver shared by every operation
        security: Authenticators by security scheme name
        logger: Logger for registration events
        validate_responses: Validate handler results against the 200 schema
            (a mismatch is answered with 500)

    Returns:
        Registered RouteRecords in registration order.

    Raises:
        MissingOperationHandler: If an operation has no callable handler.
        InvalidMultipartSchema: If a multipart body cannot describe one file.
        UndeclaredPathParameter: If a path placeholder has no declared
            path parameter.

    Example:
        >>> router = APIRouter()
        >>> records = register_routes_from_document(
        ...     router, document, resolver=resolver, security={}, logger=logger
        ... )
        >>> [(r.method.value, r.path) for r in records]
        [('GET', '/api/v1/test-action'), ('GET', '/api/v1/items/{id:str}')]
    """
    records: list[RouteRecord] = []

    for template, path_item in document.paths.items():
        for method, operation in path_item.operations():
            if not operation.operation_id:
                logger.warning(
                    "Operation skipped: no operationId",
                    method=method.value,
                    path=template,
                )
                continue

            record = build_route_record(
                document.base_path,
                template,
                path_item,
                method,
                operation,
                resolver=resolver,
                security=security,
            )

            validators = compile_validators(
                record.schema, validate_responses=validate_responses
            )
            router.add_api_route(
                path=record.path,
                endpoint=build_endpoint(
                    record.handler,
                    operation_id=record.operation_id,
                    response_validator=validators.response,
                ),
                methods=[record.method.value],
                operation_id=record.operation_id,
                name=record.operation_id,
                summary=operation.summary,
                response_model=None,
                dependencies=_build_dependencies(record, security, validators),
            )
            records.append(record)

            logger.info(
                "Route registered",
                method=record.method.value,
                path=record.path,
                operation_id=record.operation_id,
                security_scheme=record.security_scheme,
                upload_field=record.upload_field,
            )

    logger.info("Routes registered", count=len(records))
    return records


def build_route_record(
    base_path: str,
    template: str,
    path_item: PathItemSchema,
    method: HTTPMethod,
    operation: OperationSchema,
    *,
    resolver: ControllerResolverProtocol,
    security: SecurityRegistry,
) -> RouteRecord:
    """Synthesize the route of one operation without registering it.

    Args:
        base_path: Server prefix ("" for none)
        template: Document path template ("/items/{id}")
        path_item: Path entry holding the controller reference
        method: HTTP method of the operation
        operation: Operation with a non-empty operationId
        resolver: Controller resolver
        security: Authenticators by security scheme name

    Returns:
        RouteRecord with the absolute rewritten path and the schema
        stripped of its multipart part.

    Raises:
        MissingOperationHandler: If the operation has no operationId or the
            handler cannot be bound.
        InvalidMultipartSchema: If the multipart body is malformed.
        UndeclaredPathParameter: If a placeholder is not a declared path
            parameter.
    """
    if not operation.operation_id:
        raise MissingOperationHandler(
            code=ErrorCode.OPERATION_ID_MISSING,
            message=f"{method.value} {template}: operation has no operationId",
            details={"method": method.value, "path": template},
        )

    handler = resolver.resolve(path_item.controller, operation.operation_id)
    schema = derive_schema(operation, path_item.parameters)

    declared = set((schema.params or {}).get("properties", {}))
    undeclared = [name for name in path_placeholders(template) if name not in declared]
    if undeclared:
        raise UndeclaredPathParameter(
            code=ErrorCode.PATH_PARAMETER_UNDECLARED,
            message=(
                f"{method.value} {template}: placeholders without a declared "
                f"path parameter: {', '.join(undeclared)}"
            ),
            details={
                "method": method.value,
                "path": template,
                "operation_id": operation.operation_id,
                "placeholders": undeclared,
            },
        )

    path = rewrite_path(template) if schema.params else template

    upload_field: str | None = None
    if schema.multipart is not None:
        upload_field = extract_upload_field(schema.multipart)
        schema = schema.without_multipart()

    return RouteRecord(
        method=method,
        path=f"{base_path}{path}",
        operation_id=operation.operation_id,
        handler=handler,
        schema=schema,
        security_scheme=resolve_security_scheme(operation.security, security),
        upload_field=upload_field,
    )


def _build_dependencies(
    record: RouteRecord,
    security: SecurityRegistry,
    validators: RouteValidators,
) -> list[Any]:
    """Build FastAPI dependencies of one route.

    Dependencies run in declaration order:
        1. auth hook (always; sets request.state.auth, None when unguarded)
        2. request validator (query, path, JSON body)
        3. upload pre-handler (only when the route has an upload field)

    Args:
        record: Synthesized route
        security: Authenticators by security scheme name
        validators: Compiled RouteValidators of the route

    Returns:
        List of FastAPI dependencies to inject
    """
    authenticator = security[record.security_scheme] if record.security_scheme else None
    dependencies = [
        Depends(build_auth_hook(authenticator)),
        Depends(
            build_request_validator(
                record.schema, validators, upload_field=record.upload_field
            )
        ),
    ]
    if record.upload_field is not None:
        dependencies.append(Depends(build_upload_handler(record.upload_field)))
    return dependencies
