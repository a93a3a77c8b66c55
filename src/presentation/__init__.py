"""Presentation layer - HTTP concerns of the generated application.

Structure:
- routers/api/routes/: route synthesis from the OpenAPI document
- routers/api/errors/: RFC 9457 Problem Details and exception handlers
- routers/api/middleware/: request tracing

The presentation layer binds document operations to controller handlers but
contains NO business logic; controllers do.
"""
