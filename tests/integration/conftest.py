"""
Integration fixtures.

The real application, sharing the test session from the root conftest,
driven over httpx's ASGI transport. The JWT secret is patched in so no
config/.env is needed.
"""

from collections.abc import AsyncGenerator, Callable
from types import SimpleNamespace
from typing import Any
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from inkline.backend.core.database import get_db_session

TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-testing-purposes"
TEST_SECRETS = SimpleNamespace(db_password="unused", jwt_secret=TEST_JWT_SECRET)


@pytest.fixture
async def app(db_session: AsyncSession) -> AsyncGenerator[FastAPI, None]:
    async def shared_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    with patch("inkline.backend.core.config.get_settings", return_value=TEST_SECRETS), \
         patch("inkline.backend.core.security.get_settings", return_value=TEST_SECRETS):
        from inkline.backend.main import create_app

        application = create_app()
        application.dependency_overrides[get_db_session] = shared_session
        yield application
        application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http


@pytest.fixture
def make_headers(app: FastAPI) -> Callable[[str], dict[str, str]]:
    """Bearer headers for any user id; signed while the test secret is patched in."""
    from inkline.backend.core.security import create_access_token

    def _make(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}

    return _make


@pytest.fixture
def auth_headers(make_headers) -> dict[str, str]:
    return make_headers("test-user-id")


class ApiAssertions:
    """Envelope checks that return the interesting member."""

    @staticmethod
    def _status(response: Any, expected: int) -> dict[str, Any]:
        assert response.status_code == expected, (
            f"expected {expected}, got {response.status_code}: {response.text}"
        )
        return response.json()

    @classmethod
    def assert_success(cls, response: Any, expected_status: int = 200) -> Any:
        body = cls._status(response, expected_status)
        assert body["success"] is True, body
        return body["data"]

    @classmethod
    def assert_error(
        cls, response: Any, expected_status: int, expected_code: str | None = None
    ) -> dict[str, Any]:
        body = cls._status(response, expected_status)
        assert body["success"] is False, body
        error = body["error"]
        if expected_code is not None:
            assert error["code"] == expected_code, error
        return error

    @classmethod
    def assert_validation_error(cls, response: Any, field: str | None = None) -> dict[str, Any]:
        error = cls.assert_error(response, 422, "VAL_REQUEST_INVALID")
        if field is not None:
            fields = [e["field"] for e in (error.get("details") or {}).get("validation_errors", [])]
            assert any(field in f for f in fields), fields
        return error


@pytest.fixture
def api() -> type[ApiAssertions]:
    return ApiAssertions
