"""Per-route request hooks.

Each synthesized route is registered with three FastAPI dependencies, run in
declaration order, and one endpoint:

    1. auth hook: awaits the route's authenticator, sets ``request.state.auth``
    2. request validator: coerces and validates query, path and JSON body,
       sets ``request.state.query``, ``request.state.params``, ``request.state.body``
    3. upload pre-handler: parses multipart forms, sets ``request.state.file``
       (only registered on routes with an upload field)
    endpoint: calls the controller handler, responds 200 with its JSON result

Handlers receive the Starlette request and read everything from
``request.state``.
"""

import inspect
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from src.domain.protocols import Handler
from src.domain.value_objects import UploadedFile
from src.presentation.routers.api.routes.metadata import (
    CONTENT_TYPE_MULTIPART_FORM_DATA,
    Authenticator,
    DerivedSchema,
)
from src.presentation.routers.api.routes.validation import (
    RouteValidators,
    collect_errors,
    read_json_body,
    read_path_params,
    read_query,
)


# =============================================================================
# Authentication
# =============================================================================


def build_auth_hook(authenticator: Authenticator | None):
    """Build the dependency that authenticates a request.

    Args:
        authenticator: Resolved authenticator, or None for unguarded routes.

    Returns:
        Async dependency storing the authenticator result on
        ``request.state.auth`` (None when no authenticator applies).
        Exceptions raised by the authenticator propagate, so an
        ``HTTPException(401)`` becomes a 401 response.
    """

    async def authenticate(request: Request) -> None:
        auth: Any = None
        if authenticator is not None:
            auth = authenticator(request)
            if inspect.isawaitable(auth):
                auth = await auth
        request.state.auth = auth

    return authenticate


# =============================================================================
# Validation
# =============================================================================


def _is_multipart(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.lower().startswith(CONTENT_TYPE_MULTIPART_FORM_DATA)


def build_request_validator(
    schema: DerivedSchema,
    validators: RouteValidators,
    *,
    upload_field: str | None = None,
):
    """Build the dependency that validates a request against its route schema.

    All locations are checked before failing, so one 400 response lists
    every error. On upload routes a multipart request skips JSON body
    handling; the upload pre-handler fills ``request.state.body`` instead.

    Args:
        schema: Route schema (used for coercion).
        validators: Compiled validators of the route.
        upload_field: Upload field of the route, None when it accepts no file.

    Returns:
        Async dependency raising RequestValidationError on failure.
    """

    async def validate_request(request: Request) -> None:
        query = read_query(request, schema.querystring)
        params = read_path_params(request, schema.params)
        form_upload = upload_field is not None and _is_multipart(request)
        body = None
        if not form_upload:
            body = await read_json_body(request, expects_json=schema.body is not None)

        errors: list[dict[str, Any]] = []
        if validators.querystring is not None:
            errors.extend(collect_errors(validators.querystring, query, "query"))
        if validators.params is not None:
            errors.extend(collect_errors(validators.params, params, "params"))
        check_body = body is not None or schema.body_required
        if validators.body is not None and not form_upload and check_body:
            errors.extend(collect_errors(validators.body, body, "body"))
        if errors:
            raise RequestValidationError(errors, body=body)

        request.state.query = query
        request.state.params = params
        request.state.body = body

    return validate_request


# =============================================================================
# Multipart Upload
# =============================================================================


def build_upload_handler(field_name: str):
    """Build the dependency that accepts a single file upload.

    Non-multipart requests pass through with ``request.state.file = None``.
    For multipart requests the file sent under ``field_name`` is read into an
    UploadedFile and the remaining text fields replace ``request.state.body``.

    Args:
        field_name: Only form field allowed to carry a file.

    Returns:
        Async dependency raising RequestValidationError when a file arrives
        under another field, or more than one file is sent.
    """

    async def handle_upload(request: Request) -> None:
        request.state.file = None
        if not _is_multipart(request):
            return

        uploaded: UploadedFile | None = None
        fields: dict[str, Any] = {}
        async with request.form() as form:
            for name, value in form.multi_items():
                if not isinstance(value, UploadFile):
                    fields[name] = value
                    continue
                if name != field_name or uploaded is not None:
                    raise RequestValidationError(
                        [
                            {
                                "loc": ("body", name),
                                "msg": f"Unexpected file field '{name}', expected a single '{field_name}'",
                                "type": "unexpected_file",
                            }
                        ]
                    )
                buffer = await value.read()
                uploaded = UploadedFile(
                    fieldname=name,
                    originalname=value.filename or "",
                    encoding=value.headers.get("content-transfer-encoding", "7bit"),
                    mimetype=value.content_type or "application/octet-stream",
                    buffer=buffer,
                    size=len(buffer),
                )

        request.state.file = uploaded
        request.state.body = fields

    return handle_upload


# =============================================================================
# Endpoint
# =============================================================================


def build_endpoint(
    handler: Handler,
    *,
    operation_id: str,
    response_validator=None,
):
    """Wrap a controller handler as a FastAPI endpoint.

    Coroutine handlers are awaited; plain functions run in the threadpool.

    Args:
        handler: Controller export bound to the operation.
        operation_id: Operation name (used as the endpoint name).
        response_validator: Draft7Validator of the 200 response, or None to
            skip response validation.

    Returns:
        Endpoint responding 200 with the JSON-encoded handler result.

    Raises:
        ResponseValidationError: From the endpoint, when the result does not
            match the response schema.
    """

    async def endpoint(request: Request) -> JSONResponse:
        if inspect.iscoroutinefunction(handler):
            result = await handler(request)
        else:
            result = await run_in_threadpool(handler, request)
            if inspect.isawaitable(result):
                result = await result

        content = jsonable_encoder(result)
        if response_validator is not None:
            errors = collect_errors(response_validator, content, "response")
            if errors:
                raise ResponseValidationError(errors, body=content)

        return JSONResponse(status_code=200, content=content)

    endpoint.__name__ = operation_id
    return endpoint
