"""Controller modules referenced by tests/fixtures/openapi/petstore.yaml."""
