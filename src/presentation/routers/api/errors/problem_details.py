"""RFC 9457 Problem Details for HTTP APIs.

Error responses of synthesized routes are rendered with these models.

RFC 9457: https://www.rfc-editor.org/rfc/rfc9457

Exports:
    ErrorDetail: Individual location-specific error
    ProblemDetails: RFC 9457 compliant error response schema
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Individual validation error.

    Attributes:
        field: Dotted location of the failing value ("query.limit", "body.name")
        code: JSON-schema keyword that failed ("type", "required", ...)
        message: Human-readable error message

    Examples:
        >>> error = ErrorDetail(
        ...     field="params.id",
        ...     code="pattern",
        ...     message="'abc' does not match '^[0-9]+$'",
        ... )
    """

    field: str = Field(..., description="Location of the failing value")
    code: str = Field(..., description="Failing schema keyword")
    message: str = Field(..., description="Human-readable error message")


class ProblemDetails(BaseModel):
    """RFC 9457 Problem Details for HTTP APIs.

    Attributes:
        type: URI reference identifying the problem type
        title: Short, human-readable summary of the problem type
        status: HTTP status code for this occurrence
        detail: Human-readable explanation specific to this occurrence
        instance: URI reference identifying the specific occurrence
        errors: Optional list of validation errors
        trace_id: Optional request trace ID for debugging

    Examples:
        >>> problem = ProblemDetails(
        ...     type="http://localhost:3000/errors/validation-failed",
        ...     title="Validation Failed",
        ...     status=400,
        ...     detail="Request validation failed. Check 'errors' for details.",
        ...     instance="/api/v1/items/abc",
        ...     errors=[
        ...         ErrorDetail(
        ...             field="params.id",
        ...             code="pattern",
        ...             message="'abc' does not match '^[0-9]+$'",
        ...         )
        ...     ],
        ... )
    """

    type: str = Field(
        ...,
        description="URI reference identifying the problem type",
        examples=["http://localhost:3000/errors/validation-failed"],
    )
    title: str = Field(
        ...,
        description="Short, human-readable summary",
        examples=["Validation Failed"],
    )
    status: int = Field(
        ...,
        description="HTTP status code",
        examples=[400],
    )
    detail: str = Field(
        ...,
        description="Human-readable explanation",
        examples=["Request validation failed. Check 'errors' for details."],
    )
    instance: str = Field(
        ...,
        description="URI reference identifying this occurrence",
        examples=["/api/v1/items/abc"],
    )
    errors: list[ErrorDetail] | None = Field(
        None,
        description="List of validation errors",
    )
    trace_id: str | None = Field(
        None,
        description="Request trace ID for debugging",
    )
