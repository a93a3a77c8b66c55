"""API tests package.

End-to-end tests through the application built by create_app() from
tests/fixtures/openapi/petstore.yaml, using TestClient:
- Handler binding and path rewriting
- Request validation and coercion
- Authentication and multipart uploads
- RFC 9457 error responses and startup failures
"""
