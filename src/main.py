"""
Main FastAPI application entry point.

The application is built by create_app(), which loads the OpenAPI document,
binds every operation to its controller handler and registers the resulting
routes. Startup errors (invalid document, missing handler, malformed
multipart body) propagate from create_app(), so a server never starts with
a partial route table.

Run with:
    uvicorn src.main:create_app --factory
"""

from collections.abc import Mapping

from fastapi import APIRouter, FastAPI

from src.core.config import Settings, get_settings
from src.core.container import create_logger, get_controller_resolver, get_logger
from src.infrastructure.openapi import load_api_document
from src.presentation.routers.api.errors import register_exception_handlers
from src.presentation.routers.api.middleware.trace_middleware import TraceMiddleware
from src.presentation.routers.api.routes.generator import register_routes_from_document
from src.presentation.routers.api.routes.metadata import Authenticator


def create_app(
    settings: Settings | None = None,
    *,
    security: Mapping[str, Authenticator] | None = None,
) -> FastAPI:
    """Create the application serving the configured OpenAPI document.

    Args:
        settings: Application settings (defaults to get_settings()).
        security: Authenticators by security scheme name. Operations whose
            first security requirement names a scheme missing here are
            served without authentication.

    Returns:
        FastAPI application with one route per document operation.

    Raises:
        SpecValidationError: If the document is unreadable or invalid.
        MissingOperationHandler: If an operation has no callable handler.
        InvalidMultipartSchema: If a multipart body does not declare one file.
        UndeclaredPathParameter: If a path placeholder is not declared.
    """
    if settings is None:
        settings = get_settings()
        logger = get_logger()
    else:
        logger = create_logger(settings)

    document = load_api_document(settings.openapi_file_path)
    logger.info(
        "OpenAPI document loaded",
        title=document.title,
        version=document.version,
        base_path=document.base_path,
        file=settings.openapi_file_path,
    )

    app = FastAPI(
        title=document.title or settings.app_name,
        version=document.version or settings.app_version,
        docs_url=settings.openapi_url_path,
        redoc_url=None,
        openapi_url=f"{settings.openapi_url_path.rstrip('/')}/json",
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.logger = logger

    # Serve the document as written instead of FastAPI's generated schema
    app.openapi_schema = document.raw

    # Wire trace middleware (request correlation)
    app.add_middleware(TraceMiddleware)

    # Register global exception handlers (RFC 9457 error responses)
    register_exception_handlers(app)

    router = APIRouter()
    resolver = get_controller_resolver(settings.controllers_package)
    register_routes_from_document(
        router,
        document,
        resolver=resolver,
        security=dict(security or {}),
        logger=logger,
        validate_responses=settings.validate_responses,
    )
    logger.info("Controllers loaded", modules=sorted(resolver.loaded_modules))
    app.include_router(router)

    return app
