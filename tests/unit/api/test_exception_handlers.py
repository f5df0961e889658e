"""Unit tests for exception handlers."""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.exception_handlers import setup_exception_handlers
from core.exceptions import DonationNotFoundError, InvalidQueryError, NoWorkspaceSelectedError


def _create_test_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


async def _get(app: FastAPI, path: str, **kwargs):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.request(kwargs.pop("method", "GET"), path, **kwargs)


class TestExceptionHandlers:
    @pytest.mark.asyncio
    async def test_app_exception_returns_error_code_and_message(self) -> None:
        app = _create_test_app()

        @app.get("/raise-app")
        async def _() -> None:
            raise DonationNotFoundError("some-id")

        response = await _get(app, "/raise-app")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "DONATION_NOT_FOUND"
        assert "some-id" in body["message"]
        assert body["details"]["donation_id"] == "some-id"

    @pytest.mark.asyncio
    async def test_precondition_failure_without_details(self) -> None:
        app = _create_test_app()

        @app.post("/action")
        async def _() -> None:
            raise NoWorkspaceSelectedError()

        response = await _get(app, "/action", method="POST")

        assert response.status_code == 400
        assert response.json() == {
            "error_code": "NO_WORKSPACE_SELECTED",
            "message": "No workspace selected",
            "details": None,
        }

    @pytest.mark.asyncio
    async def test_invalid_query_echoes_value(self) -> None:
        app = _create_test_app()

        @app.get("/list")
        async def _() -> None:
            raise InvalidQueryError("Cannot sort on field: password", "password")

        response = await _get(app, "/list")

        assert response.status_code == 400
        assert response.json()["details"] == {"value": "password"}

    @pytest.mark.asyncio
    async def test_http_exception_returns_standard_format(self) -> None:
        from starlette.exceptions import HTTPException

        app = _create_test_app()

        @app.get("/raise-http")
        async def _() -> None:
            raise HTTPException(status_code=403, detail="Forbidden")

        response = await _get(app, "/raise-http")

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "HTTP_ERROR"
        assert body["message"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_validation_error_returns_field_details(self) -> None:
        from pydantic import BaseModel, Field

        app = _create_test_app()

        class Body(BaseModel):
            amount: float = Field(..., gt=0)

        @app.post("/validate")
        async def _(body: Body) -> dict[str, bool]:
            return {"ok": True}

        response = await _get(app, "/validate", method="POST", json={"amount": -1})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "body.amount"

    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500(self) -> None:
        app = _create_test_app()

        mock_request = MagicMock()
        mock_request.state.request_id = "test-req-id"

        handler = app.exception_handlers.get(Exception)
        assert handler is not None, "Global exception handler not registered"

        response = await handler(mock_request, RuntimeError("Something went wrong"))  # type: ignore[misc]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["details"]["request_id"] == "test-req-id"
