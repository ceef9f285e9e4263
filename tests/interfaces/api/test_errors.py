"""Tests for the exception handlers rendering the response envelope."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from jobchat.domain.errors import (
    Conflict,
    ConversationClosed,
    Forbidden,
    NotFound,
    Unauthenticated,
    ValidationError,
)
from jobchat.interfaces.api.errors import register_exception_handlers, status_code_for


def _app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/conflict")
    def conflict():
        raise Conflict("A conversation already exists for this application", conversation_id=7)

    @app.get("/closed")
    def closed():
        raise ConversationClosed("Cannot send messages to a closed or archived conversation")

    @app.get("/teapot")
    def teapot():
        raise HTTPException(status_code=418, detail="I'm a teapot")

    @app.get("/boom")
    def boom():
        raise RuntimeError("database password is hunter2")

    @app.get("/items/{item_id}")
    def item(item_id: int):
        return {"id": item_id}

    return app


def test_status_codes_follow_the_error_taxonomy() -> None:
    assert status_code_for(ValidationError("x")) == 400
    assert status_code_for(Unauthenticated("x")) == 401
    assert status_code_for(Forbidden("x")) == 403
    assert status_code_for(NotFound("x")) == 404
    assert status_code_for(Conflict("x", conversation_id=1)) == 400
    assert status_code_for(ConversationClosed("x")) == 400


def test_conflict_carries_the_existing_conversation_id() -> None:
    response = TestClient(_app()).get("/conflict")

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "A conversation already exists for this application",
        "data": {"conversationId": 7},
    }


def test_conversation_closed_is_a_bad_request() -> None:
    response = TestClient(_app()).get("/closed")

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_http_exceptions_use_the_envelope() -> None:
    response = TestClient(_app()).get("/teapot")

    assert response.status_code == 418
    assert response.json() == {"success": False, "error": "I'm a teapot"}


def test_request_validation_errors_become_bad_requests() -> None:
    response = TestClient(_app()).get("/items/not-a-number")

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "item_id" in response.json()["error"]


def test_unexpected_errors_do_not_leak_details() -> None:
    client = TestClient(_app(), raise_server_exceptions=False)

    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error"}
    assert "hunter2" not in response.text
