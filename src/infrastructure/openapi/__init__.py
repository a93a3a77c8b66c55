"""OpenAPI document loading (YAML/JSON, $ref resolution, validation)."""

from src.infrastructure.openapi.spec_loader import load_api_document, parse_api_document

__all__ = ["load_api_document", "parse_api_document"]
