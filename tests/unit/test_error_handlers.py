"""Unit tests for exception-to-response mappers."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import NotFoundError
from app.core.errors import register_error_handlers
from app.deserialization.failures import PathReference
from app.deserialization.failures import PayloadMappingError
from app.deserialization.failures import stream_constraint_cause
from app.schemas.submission import VexSubmitRequest


def _build_client() -> TestClient:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/query")
    def query(limit: int) -> dict[str, int]:
        return {"limit": limit}

    @app.get("/not-found")
    def not_found() -> None:
        raise NotFoundError("Project 42 not found")

    @app.get("/mapping")
    def mapping_error() -> None:
        raise PayloadMappingError("Cannot deserialize value of type `boolean`")

    @app.get("/oversized-vex")
    def oversized_vex() -> None:
        raise PayloadMappingError(
            "String value length (9) exceeds the maximum allowed (8)",
            cause=stream_constraint_cause("String value length (9) exceeds the maximum allowed (8)"),
            path=[PathReference(VexSubmitRequest, "vex")],
        )

    @app.get("/conflict")
    def conflict() -> None:
        raise StarletteHTTPException(status_code=409, detail="Project already exists")

    @app.get("/http-not-found")
    def http_not_found() -> None:
        raise StarletteHTTPException(status_code=404, detail="Component not found")

    @app.get("/boom")
    def boom() -> None:
        raise RuntimeError("database password is hunter2")

    return TestClient(app, raise_server_exceptions=False)


def test_mapping_errors_pass_message_through_as_problem_document() -> None:
    client = _build_client()

    response = client.get("/mapping")

    assert response.status_code == 400
    assert response.headers["content-type"] == "application/problem+json"
    assert response.json() == {
        "status": 400,
        "title": "The provided JSON payload could not be mapped",
        "detail": "Cannot deserialize value of type `boolean`",
    }


def test_oversized_vex_mapping_errors_use_tailored_detail() -> None:
    client = _build_client()

    response = client.get("/oversized-vex")

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail.startswith("The VEX is too large to be transmitted safely via Base64 encoded JSON value.")
    assert detail.endswith("Original cause: String value length (9) exceeds the maximum allowed (8)")


def test_not_found_errors_have_empty_body() -> None:
    client = _build_client()

    response = client.get("/not-found")

    assert response.status_code == 404
    assert response.content == b""


def test_http_not_found_and_unknown_routes_have_empty_body() -> None:
    client = _build_client()

    for path in ("/http-not-found", "/does-not-exist"):
        response = client.get(path)

        assert response.status_code == 404
        assert response.content == b""


def test_request_validation_errors_are_rendered_as_problem_document() -> None:
    client = _build_client()

    response = client.get("/query")

    assert response.status_code == 400
    assert response.headers["content-type"] == "application/problem+json"
    payload = response.json()
    assert payload["status"] == 400
    assert payload["title"] == "The request could not be validated"
    assert payload["detail"].startswith("limit: ")


def test_other_http_errors_use_reason_phrase_title() -> None:
    client = _build_client()

    response = client.get("/conflict")

    assert response.status_code == 409
    assert response.json() == {
        "status": 409,
        "title": "Conflict",
        "detail": "Project already exists",
    }


def test_unhandled_errors_do_not_leak_internals() -> None:
    client = _build_client()

    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"status": 500, "title": "An unexpected error occurred"}
    assert "hunter2" not in response.text
