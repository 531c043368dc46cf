"""Tests for error handler middleware."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from stategate.api.errors import (
    BackendError,
    BodyReadError,
    MissingKeyError,
    StateNotFoundError,
)
from stategate.api.middleware.error_handler import setup_error_handlers


class TestErrorHandlers:
    """Tests for setup_error_handlers."""

    @pytest.fixture
    def app(self) -> FastAPI:
        """Create test FastAPI app with error handlers."""
        test_app = FastAPI()
        setup_error_handlers(test_app)
        return test_app

    @pytest.mark.parametrize(
        ("error", "status_code", "body"),
        [
            (MissingKeyError(), 400, "missing key"),
            (BodyReadError(), 400, "read body failed"),
            (StateNotFoundError("k"), 404, "not found"),
            (BackendError(), 500, "internal error"),
        ],
    )
    def test_api_errors_render_plain_text(
        self, app: FastAPI, error: Exception, status_code: int, body: str
    ) -> None:
        """API errors should map to their status code and fixed message."""

        @app.get("/boom")
        async def boom() -> None:
            raise error

        response = TestClient(app).get("/boom")

        assert response.status_code == status_code
        assert response.text == body
        assert response.headers["content-type"].startswith("text/plain")

    def test_unexpected_exception_returns_generic_500(self, app: FastAPI) -> None:
        """Unhandled exceptions should not leak their message."""

        @app.get("/crash")
        async def crash() -> None:
            raise ValueError("secret internal detail")

        response = TestClient(app, raise_server_exceptions=False).get("/crash")

        assert response.status_code == 500
        assert response.text == "internal error"
        assert "secret" not in response.text
