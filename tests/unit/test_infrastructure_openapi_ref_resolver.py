"""Unit tests for $ref resolution.

Tests cover:
- Local JSON pointers, RFC 6901 escaping, sibling keys
- Whole-file and pointer-into-file references
- Shared resolution of repeated references
- Remote, unresolvable and circular references
"""

from pathlib import Path

import pytest

from src.core.enums import ErrorCode
from src.core.errors import SpecValidationError
from src.infrastructure.openapi.ref_resolver import RefResolver


def _components(**schemas) -> dict:
    return {"components": {"schemas": schemas}}


@pytest.mark.unit
class TestLocalReferences:
    """Test references within the same document."""

    def test_local_pointer_is_inlined(self, tmp_path: Path):
        document = {
            **_components(Id={"type": "string"}),
            "value": {"$ref": "#/components/schemas/Id"},
        }

        resolved = RefResolver(tmp_path / "openapi.yaml").dereference(document)

        assert resolved["value"] == {"type": "string"}

    def test_input_document_is_not_modified(self, tmp_path: Path):
        document = {
            **_components(Id={"type": "string"}),
            "value": {"$ref": "#/components/schemas/Id"},
        }

        RefResolver(tmp_path / "openapi.yaml").dereference(document)

        assert document["value"] == {"$ref": "#/components/schemas/Id"}

    def test_escaped_pointer_tokens(self, tmp_path: Path):
        document = {
            "paths": {"/items/{id}": {"summary": "item"}},
            "value": {"$ref": "#/paths/~1items~1{id}"},
        }

        resolved = RefResolver(tmp_path / "openapi.yaml").dereference(document)

        assert resolved["value"] == {"summary": "item"}

    def test_array_index_token(self, tmp_path: Path):
        document = {"list": ["a", {"type": "integer"}], "value": {"$ref": "#/list/1"}}

        resolved = RefResolver(tmp_path / "openapi.yaml").dereference(document)

        assert resolved["value"] == {"type": "integer"}

    def test_sibling_keys_override_target(self, tmp_path: Path):
        document = {
            **_components(Name={"type": "string", "description": "name"}),
            "value": {"$ref": "#/components/schemas/Name", "description": "override"},
        }

        resolved = RefResolver(tmp_path / "openapi.yaml").dereference(document)

        assert resolved["value"] == {"type": "string", "description": "override"}

    def test_nested_references_resolve_transitively(self, tmp_path: Path):
        document = {
            **_components(
                Id={"type": "string"},
                Item={"type": "object", "properties": {"id": {"$ref": "#/components/schemas/Id"}}},
            ),
            "value": {"$ref": "#/components/schemas/Item"},
        }

        resolved = RefResolver(tmp_path / "openapi.yaml").dereference(document)

        assert resolved["value"]["properties"]["id"] == {"type": "string"}


@pytest.mark.unit
class TestFileReferences:
    """Test references into other files."""

    def test_whole_file_reference(self, tmp_path: Path, write_document):
        write_document({"type": "string", "format": "uuid"}, name="schemas/id.yaml")
        document = {"value": {"$ref": "schemas/id.yaml"}}

        resolved = RefResolver(tmp_path / "openapi.yaml").dereference(document)

        assert resolved["value"] == {"type": "string", "format": "uuid"}

    def test_pointer_into_file_resolves_relative_to_that_file(
        self, tmp_path: Path, write_document
    ):
        write_document(
            {
                "Item": {
                    "type": "object",
                    "properties": {"id": {"$ref": "common.yaml#/Id"}},
                }
            },
            name="schemas/item.yaml",
        )
        write_document({"Id": {"type": "integer"}}, name="schemas/common.yaml")
        document = {"value": {"$ref": "schemas/item.yaml#/Item"}}

        resolved = RefResolver(tmp_path / "openapi.yaml").dereference(document)

        assert resolved["value"]["properties"]["id"] == {"type": "integer"}

    def test_missing_file(self, tmp_path: Path):
        document = {"value": {"$ref": "schemas/absent.yaml"}}

        with pytest.raises(SpecValidationError) as exc_info:
            RefResolver(tmp_path / "openapi.yaml").dereference(document)

        assert exc_info.value.code == ErrorCode.SPEC_REF_UNRESOLVABLE


@pytest.mark.unit
class TestReferenceFailures:
    """Test unresolvable, remote and circular references."""

    def test_unknown_pointer(self, tmp_path: Path):
        document = {**_components(), "value": {"$ref": "#/components/schemas/Missing"}}

        with pytest.raises(SpecValidationError) as exc_info:
            RefResolver(tmp_path / "openapi.yaml").dereference(document)

        assert exc_info.value.code == ErrorCode.SPEC_REF_UNRESOLVABLE
        assert exc_info.value.details["ref"] == "#/components/schemas/Missing"

    def test_fragment_without_leading_slash(self, tmp_path: Path):
        document = {"value": {"$ref": "#components"}}

        with pytest.raises(SpecValidationError) as exc_info:
            RefResolver(tmp_path / "openapi.yaml").dereference(document)

        assert exc_info.value.code == ErrorCode.SPEC_REF_UNRESOLVABLE

    def test_remote_reference(self, tmp_path: Path):
        document = {"value": {"$ref": "https://example.com/schemas/item.yaml"}}

        with pytest.raises(SpecValidationError) as exc_info:
            RefResolver(tmp_path / "openapi.yaml").dereference(document)

        assert exc_info.value.code == ErrorCode.SPEC_REF_UNRESOLVABLE

    def test_direct_cycle(self, tmp_path: Path):
        document = _components(
            A={"$ref": "#/components/schemas/B"},
            B={"$ref": "#/components/schemas/A"},
        )

        with pytest.raises(SpecValidationError) as exc_info:
            RefResolver(tmp_path / "openapi.yaml").dereference(document)

        assert exc_info.value.code == ErrorCode.SPEC_REF_CIRCULAR

    def test_recursive_schema(self, tmp_path: Path):
        document = _components(
            Node={
                "type": "object",
                "properties": {
                    "children": {
                        "type": "array",
                        "items": {"$ref": "#/components/schemas/Node"},
                    }
                },
            },
            Tree={"$ref": "#/components/schemas/Node"},
        )

        with pytest.raises(SpecValidationError) as exc_info:
            RefResolver(tmp_path / "openapi.yaml").dereference(document)

        assert exc_info.value.code == ErrorCode.SPEC_REF_CIRCULAR
