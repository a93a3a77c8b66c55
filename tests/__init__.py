"""Test suite for the OpenAPI router.

Test structure follows the test pyramid:
- unit/: Unit tests - loader, derivations, resolvers, hooks in isolation
- api/: API tests - the generated application end-to-end via TestClient
- fixtures/: OpenAPI documents and controller modules shared by both
"""
