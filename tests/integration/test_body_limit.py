"""Request body limits for model-output and ordinary endpoints."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from codeforge.api.app import create_app
from codeforge.api.middleware import RequestBodyLimitMiddleware
from codeforge.settings import Settings

MB = 1024 * 1024


def _client(settings: Settings) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=create_app(settings)), base_url="http://test")


@pytest.fixture
async def client():
    async with _client(Settings()) as c:
        yield c


@pytest.fixture
async def small_client():
    """App with limits small enough to hit with an ordinary request."""
    async with _client(Settings(max_text_body_bytes=2048, max_body_bytes=256)) as c:
        yield c


class TestLimitFor:
    @pytest.mark.parametrize(
        ("path", "limit"),
        [
            ("/extract", 5 * MB),
            ("/assemble", 5 * MB),
            ("/sessions/abc/projects", 5 * MB),
            ("/sessions", 1 * MB),
            ("/sessions/abc/projects/p1/logs", 1 * MB),
        ],
    )
    def test_defaults(self, path: str, limit: int) -> None:
        middleware = RequestBodyLimitMiddleware(app=None)
        assert middleware.limit_for(path) == limit


class TestConfiguredLimits:
    async def test_text_endpoint_over_limit(self, small_client: AsyncClient) -> None:
        response = await small_client.post("/extract", json={"text": "x" * 4096})
        assert response.status_code == 413
        assert response.json()["detail"] == "Request body too large (max 2048 bytes)"

    async def test_text_endpoint_within_limit(self, small_client: AsyncClient) -> None:
        response = await small_client.post("/extract", json={"text": "x" * 1024})
        assert response.status_code == 200

    async def test_log_endpoint_uses_default_limit(self, small_client: AsyncClient) -> None:
        payload = {"source": "PREVIEW_CONSOLE", "type": "log", "message": "x" * 512}
        response = await small_client.post("/sessions/abc/projects/p1/logs", json=payload)
        assert response.status_code == 413
        assert "256 bytes" in response.json()["detail"]


class TestStreamedBodies:
    @pytest.mark.parametrize(
        ("path", "size", "readable"),
        [
            ("/sessions", 1 * MB + 1, "1 MB"),
            ("/assemble", 5 * MB + 1, "5 MB"),
        ],
    )
    async def test_chunked_over_limit(
        self, client: AsyncClient, path: str, size: int, readable: str
    ) -> None:
        response = await client.post(
            path, content=b"x" * size, headers={"transfer-encoding": "chunked"}
        )
        assert response.status_code == 413
        assert readable in response.json()["detail"]

    async def test_model_output_above_default_limit(self, client: AsyncClient) -> None:
        response = await client.post("/extract", json={"text": "x" * (2 * MB)})
        assert response.status_code == 200
        assert response.json()["artifacts"] == []


class TestContentLengthHeader:
    async def test_declared_length_over_limit(self, client: AsyncClient) -> None:
        response = await client.post(
            "/sessions",
            content=b"{}",
            headers={"content-length": str(2 * MB), "content-type": "application/json"},
        )
        assert response.status_code == 413

    @pytest.mark.parametrize("value", ["not-a-number", "-1"])
    async def test_unparseable_length_falls_back_to_stream(
        self, client: AsyncClient, value: str
    ) -> None:
        response = await client.post(
            "/health", content=b"small body", headers={"content-length": value}
        )
        assert response.status_code != 500
