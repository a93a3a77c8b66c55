"""Request validation against derived JSON schemas.

Query and path values arrive as strings, so they are coerced to the declared
schema type (integer, number, boolean, null, array) before validation, the
way JSON-schema based routers conventionally do. JSON bodies are validated
as sent.

Failures are collected into FastAPI ``RequestValidationError`` entries
(``loc``/``msg``/``type``) which the exception handlers turn into a 400.
"""

import json
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from fastapi import HTTPException, status
from fastapi.exceptions import RequestValidationError
from jsonschema import Draft7Validator
from starlette.requests import Request

from src.presentation.routers.api.routes.metadata import DerivedSchema

_INTEGER = re.compile(r"^[+-]?\d+$")


@dataclass(frozen=True, slots=True, kw_only=True)
class RouteValidators:
    """Compiled validators of one route (None: nothing to validate)."""

    querystring: Draft7Validator | None = None
    params: Draft7Validator | None = None
    body: Draft7Validator | None = None
    response: Draft7Validator | None = None


def _validator(schema: Mapping[str, Any]) -> Draft7Validator:
    return Draft7Validator(schema, format_checker=Draft7Validator.FORMAT_CHECKER)


def _query_schema(
    properties: Mapping[str, Any], required: tuple[str, ...]
) -> dict[str, Any]:
    query_schema: dict[str, Any] = {"type": "object", "properties": dict(properties)}
    if required:
        query_schema["required"] = list(required)
    return query_schema


def compile_validators(
    schema: DerivedSchema, *, validate_responses: bool = True
) -> RouteValidators:
    """Compile the validators of a route once, at registration time.

    Validators are built from the route schema (``as_route_schema()``), the
    same parts the route is registered with.

    Args:
        schema: Derived schema (multipart already stripped).
        validate_responses: Compile the ``200`` response schema so handler
            results are checked before they are sent.

    Returns:
        RouteValidators for the parts the schema declares.
    """
    route_schema = schema.as_route_schema()
    querystring = route_schema.get("querystring")
    params = route_schema.get("params")
    body = route_schema.get("body")
    response_schema = route_schema.get("response", {}).get("200")
    return RouteValidators(
        querystring=(
            _validator(_query_schema(querystring, schema.required_query))
            if querystring
            else None
        ),
        params=_validator(params) if params else None,
        body=_validator(body) if body is not None else None,
        response=(
            _validator(response_schema)
            if validate_responses and response_schema is not None
            else None
        ),
    )


# =============================================================================
# Coercion
# =============================================================================


def _coerce_scalar(value: str, type_name: Any) -> tuple[bool, Any]:
    if type_name == "string":
        return True, value
    if type_name == "integer" and _INTEGER.match(value):
        return True, int(value)
    if type_name == "number":
        if _INTEGER.match(value):
            return True, int(value)
        try:
            number = float(value)
        except ValueError:
            return False, None
        if math.isfinite(number):
            return True, number
    if type_name == "boolean" and value in ("true", "false"):
        return True, value == "true"
    if type_name == "null" and value == "":
        return True, None
    return False, None


def coerce_value(value: Any, schema: Mapping[str, Any]) -> Any:
    """Coerce a string to the first declared type it converts to.

    Values that fit no declared type are returned unchanged so validation
    reports them.

    Example:
        >>> coerce_value("42", {"type": "integer"})
        42
        >>> coerce_value("abc", {"type": "integer"})
        'abc'
    """
    if not isinstance(value, str):
        return value

    declared = schema.get("type")
    for type_name in declared if isinstance(declared, list) else [declared]:
        converted, coerced = _coerce_scalar(value, type_name)
        if converted:
            return coerced
    return value


def _is_array(schema: Mapping[str, Any]) -> bool:
    declared = schema.get("type")
    return declared == "array" or (isinstance(declared, list) and "array" in declared)


def read_query(request: Request, properties: Mapping[str, Any] | None) -> dict[str, Any]:
    """Collect query values, coerced to their declared schemas.

    Repeated keys become lists when the schema declares an array; otherwise
    the last value wins.
    """
    properties = properties or {}
    query: dict[str, Any] = {}
    for name in request.query_params.keys():
        values = request.query_params.getlist(name)
        schema = properties.get(name) or {}
        if _is_array(schema):
            items = schema.get("items") or {}
            query[name] = [coerce_value(value, items) for value in values]
        else:
            query[name] = coerce_value(values[-1], schema)
    return query


def read_path_params(request: Request, params_schema: Mapping[str, Any] | None) -> dict[str, Any]:
    """Collect path parameters, coerced to their declared schemas."""
    properties = (params_schema or {}).get("properties") or {}
    return {
        name: coerce_value(value, properties.get(name) or {})
        for name, value in request.path_params.items()
    }


def _is_json(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


async def read_json_body(request: Request, *, expects_json: bool) -> Any:
    """Parse a JSON request body.

    Args:
        request: Incoming request.
        expects_json: Whether the route declares a JSON body schema.

    Returns:
        Parsed body, or None when the request carries no JSON body.

    Raises:
        RequestValidationError: If a JSON body is malformed.
        HTTPException: 415 if the route expects JSON and a non-JSON body is sent.
    """
    content_type = request.headers.get("content-type", "")
    if not _is_json(content_type):
        if expects_json and content_type and await request.body():
            raise HTTPException(
                status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                detail=f"Unsupported content type '{content_type}', expected application/json",
            )
        return None

    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        raise RequestValidationError(
            [
                {
                    "loc": ("body",),
                    "msg": "Request body is not valid JSON",
                    "type": "json_invalid",
                }
            ]
        ) from None


# =============================================================================
# Validation
# =============================================================================


def collect_errors(
    validator: Draft7Validator, instance: Any, location: str
) -> list[dict[str, Any]]:
    """Validate ``instance`` and return errors in FastAPI's error shape.

    Example:
        >>> collect_errors(_validator({"type": "integer"}), "x", "query")
        [{'loc': ('query',), 'msg': "'x' is not of type 'integer'", 'type': 'type'}]
    """
    errors = sorted(
        validator.iter_errors(instance),
        key=lambda error: [str(part) for part in error.absolute_path],
    )
    return [
        {
            "loc": (location, *error.absolute_path),
            "msg": error.message,
            "type": str(error.validator),
        }
        for error in errors
    ]
