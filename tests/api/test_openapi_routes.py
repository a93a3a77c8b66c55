"""API tests for routes synthesized from tests/fixtures/openapi/petstore.yaml.

Validates the generated application end-to-end: handler binding, path
parameters, query coercion, JSON bodies, multipart uploads, authentication
and the documentation UI.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException, Request
from fastapi.testclient import TestClient

from src.main import create_app
from tests.conftest import make_settings, minimal_document

API_KEY = "secret-key"


async def api_key_authenticator(request: Request) -> dict:
    """Accept requests carrying the test API key."""
    key = request.headers.get("X-API-Key")
    if key != API_KEY:
        raise HTTPException(
            status_code=401,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )
    return {"key": key}


@pytest.fixture
def client() -> TestClient:
    app = create_app(make_settings(), security={"apiKey": api_key_authenticator})
    return TestClient(app)


@pytest.mark.api
class TestReferenceScenarios:
    """The three reference scenarios served over HTTP."""

    def test_route_without_inputs(self, client):
        response = client.get("/api/v1/test-action")

        assert response.status_code == 200
        assert response.json() == {"message": "ok"}

    def test_route_with_path_parameter(self, client):
        response = client.get("/api/v1/items/42")

        assert response.status_code == 200
        assert response.json() == {"id": "42", "verbose": False}

    def test_multipart_upload(self, client):
        response = client.post(
            "/api/v1/upload-file",
            files={"upload": ("hello.txt", b"hello world", "text/plain")},
            data={"note": "greeting"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "file": {
                "fieldname": "upload",
                "originalname": "hello.txt",
                "mimetype": "text/plain",
                "size": 11,
                "content": "hello world",
            },
            "fields": {"note": "greeting"},
        }


@pytest.mark.api
class TestQueryAndPathParameters:
    """Test coercion and validation of query and path values."""

    def test_query_values_are_coerced(self, client):
        response = client.get("/api/v1/items", params={"limit": "5", "tags": ["a", "b"]})

        assert response.status_code == 200
        assert response.json() == {"query": {"limit": 5, "tags": ["a", "b"]}}

    def test_boolean_query_value(self, client):
        response = client.get("/api/v1/items/7", params={"verbose": "true"})

        assert response.json() == {"id": "7", "verbose": True}

    def test_integer_path_parameter_is_coerced(self, client):
        response = client.get("/api/v1/admin/users/7")

        assert response.status_code == 200
        assert response.json() == {"userId": 7}

    def test_mistyped_path_parameter_is_400_not_404(self, client):
        response = client.get("/api/v1/admin/users/seven")

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "params.userId"

    def test_sync_handler(self, client):
        response = client.get("/api/v1/sync", params={"x": "1"})

        assert response.status_code == 200
        assert response.json() == {"sync": True, "query": {"x": "1"}}


@pytest.mark.api
class TestJsonBodies:
    """Test JSON request bodies."""

    def test_valid_body_reaches_handler(self, client):
        response = client.post("/api/v1/items", json={"name": "widget", "price": 2.5})

        assert response.status_code == 200
        assert response.json() == {"created": {"name": "widget", "price": 2.5}}

    def test_body_with_path_parameter(self, client):
        response = client.put("/api/v1/items/3", json={"name": "gadget", "price": 1})

        assert response.json() == {"id": "3", "item": {"name": "gadget", "price": 1}}

    def test_unknown_property_is_rejected(self, client):
        response = client.post(
            "/api/v1/items", json={"name": "widget", "price": 1, "color": "red"}
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "additionalProperties"


@pytest.mark.api
class TestAuthentication:
    """Test authenticator pre-hooks."""

    def test_guarded_route_rejects_missing_key(self, client):
        response = client.delete("/api/v1/items/1")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "ApiKey"
        assert response.json()["detail"] == "Invalid API key"

    def test_guarded_route_exposes_auth_result(self, client):
        response = client.delete("/api/v1/items/1", headers={"X-API-Key": API_KEY})

        assert response.status_code == 200
        assert response.json() == {"deleted": "1", "auth": {"key": API_KEY}}

    def test_authentication_runs_before_validation(self, client):
        response = client.delete("/api/v1/items/not-a-number")

        assert response.status_code == 401

    def test_first_requirement_scheme_guards_route(self, client):
        assert client.get("/api/v1/secure").status_code == 401

    def test_unconfigured_first_scheme_leaves_route_open(self):
        app = create_app(make_settings(), security={"bearerAuth": api_key_authenticator})
        client = TestClient(app)

        response = client.get("/api/v1/secure")

        assert response.status_code == 200
        assert response.json() == {"auth": None}

    def test_authenticated_route_passes_auth_to_handler(self, client):
        response = client.get("/api/v1/secure", headers={"X-API-Key": API_KEY})

        assert response.json() == {"auth": {"key": API_KEY}}


@pytest.mark.api
class TestUploads:
    """Test the multipart upload pre-handler."""

    def test_file_under_other_field_is_rejected(self, client):
        response = client.post(
            "/api/v1/upload-file",
            files={"attachment": ("a.txt", b"data", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "body.attachment"

    def test_non_multipart_request_has_no_file(self, client):
        response = client.post("/api/v1/upload-file", json={"note": "no file"})

        assert response.status_code == 200
        assert response.json() == {"file": None, "fields": {"note": "no file"}}


@pytest.fixture
def dual_body_client(write_document) -> TestClient:
    """App with one upload route accepting JSON or multipart bodies."""
    path = write_document(
        minimal_document(
            {
                "/upload-file": {
                    "x-controller": "uploads",
                    "post": {
                        "operationId": "uploadFile",
                        "requestBody": {
                            "required": True,
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "object",
                                        "required": ["note"],
                                    }
                                },
                                "multipart/form-data": {
                                    "schema": {
                                        "type": "object",
                                        "properties": {
                                            "upload": {"type": "string", "format": "binary"}
                                        },
                                    }
                                },
                            },
                        },
                    },
                }
            }
        )
    )
    return TestClient(create_app(make_settings(openapi_file_path=str(path))))


@pytest.mark.api
class TestJsonOrMultipartBody:
    """Test a route declaring both a JSON and a multipart body."""

    def test_file_upload_is_accepted(self, dual_body_client):
        response = dual_body_client.post(
            "/upload-file",
            files={"upload": ("a.txt", b"abc", "text/plain")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["file"]["originalname"] == "a.txt"
        assert data["file"]["content"] == "abc"
        assert data["fields"] == {}

    def test_json_body_is_still_validated(self, dual_body_client):
        response = dual_body_client.post("/upload-file", json={"other": 1})

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "required"

    def test_json_body_reaches_handler(self, dual_body_client):
        response = dual_body_client.post("/upload-file", json={"note": "hi"})

        assert response.status_code == 200
        assert response.json() == {"file": None, "fields": {"note": "hi"}}


@pytest.mark.api
class TestDocumentationAndTracing:
    """Test the docs UI and trace header."""

    def test_docs_ui_is_served(self, client):
        response = client.get("/docs")

        assert response.status_code == 200
        assert "swagger" in response.text.lower()

    def test_document_is_served_as_written(self, client):
        response = client.get("/docs/json")

        assert response.status_code == 200
        document = response.json()
        assert document["info"] == {"title": "Item Store", "version": "1.2.0"}
        assert "/items/{id}" in document["paths"]

    def test_trace_id_header_is_generated(self, client):
        response = client.get("/api/v1/test-action")

        assert response.headers["X-Trace-Id"]

    def test_incoming_trace_id_is_echoed(self, client):
        response = client.get("/api/v1/test-action", headers={"X-Trace-Id": "trace-123"})

        assert response.headers["X-Trace-Id"] == "trace-123"

    def test_app_metadata_comes_from_document(self, client):
        assert client.app.title == "Item Store"
        assert client.app.version == "1.2.0"


@pytest.mark.api
class TestStartupLogging:
    """Test events logged while building the application."""

    def test_loaded_controller_modules_are_logged(self):
        logger = MagicMock()

        with patch("src.main.create_logger", return_value=logger):
            create_app(make_settings())

        logger.info.assert_any_call(
            "Controllers loaded", modules=["actions", "admin/users.py", "items", "uploads"]
        )
