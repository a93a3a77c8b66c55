"""OpenAPI route synthesis package.

Turns the operations of a loaded OpenAPI document into FastAPI routes.

Modules:
    metadata: Core types (DerivedSchema, RouteRecord, Authenticator)
    derivations: Path rewriting, schema derivation, upload field, security
    validation: JSON-schema request validation with query/path coercion
    request_hooks: Per-route dependencies and the endpoint wrapper
    generator: register_routes_from_document() - Register all routes

Usage:
    from src.presentation.routers.api.routes.generator import (
        register_routes_from_document,
    )

    router = APIRouter()
    register_routes_from_document(
        router, document, resolver=resolver, security=security, logger=logger
    )
"""
