"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- controllers/: Controller module import and handler lookup
- logging/: structlog console adapter
- openapi/: Document loading, $ref resolution, validation

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
