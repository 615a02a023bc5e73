"""Unit tests for HTTPClient.

Tests focus on headers, session management and URL pass-through.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from snacris.acris.runtime.rest import HTTPClient


def _mock_session(payload):
    mock_response = AsyncMock()
    mock_response.status = 200
    mock_response.json = AsyncMock(return_value=payload)
    mock_response.raise_for_status = MagicMock()
    mock_response.__aenter__ = AsyncMock(return_value=mock_response)
    mock_response.__aexit__ = AsyncMock(return_value=None)

    mock_session = MagicMock()
    mock_session.closed = False
    mock_session.get = MagicMock(return_value=mock_response)
    return mock_session, mock_response


class TestHTTPClientHeaders:
    """Request headers."""

    def test_token_header(self):
        client = HTTPClient(app_token="abc123")
        assert client.headers == {"Content-Type": "application/json", "X-App-Token": "abc123"}

    def test_token_from_environment(self, monkeypatch):
        monkeypatch.delenv("NYC_OPEN_DATA_APP_TOKEN", raising=False)
        monkeypatch.setenv("APP_TOKEN", "fallback")
        assert HTTPClient().app_token == "fallback"

    def test_no_token(self, monkeypatch):
        monkeypatch.delenv("NYC_OPEN_DATA_APP_TOKEN", raising=False)
        monkeypatch.delenv("APP_TOKEN", raising=False)
        client = HTTPClient()
        assert "X-App-Token" not in client.headers

    def test_timeout(self):
        assert HTTPClient(timeout=10.0).timeout.total == 10.0


class TestHTTPClientRequests:
    """GET behavior."""

    @pytest.mark.asyncio
    async def test_get_sends_encoded_url_verbatim(self):
        client = HTTPClient(app_token="t")
        session, response = _mock_session([{"document_id": "D1"}])
        client._session = session

        url = "https://data.example.test/resource/x.json?%24where=borough%3D1%20AND%20name%20like%20%27%25A%25%27"
        data = await client.get(url)

        assert data == [{"document_id": "D1"}]
        (sent,) = session.get.call_args.args
        assert str(sent) == url
        response.raise_for_status.assert_called_once()

    @pytest.mark.asyncio
    async def test_get_propagates_http_errors(self):
        client = HTTPClient()
        session, response = _mock_session(None)
        response.raise_for_status = MagicMock(
            side_effect=aiohttp.ClientResponseError(
                request_info=MagicMock(), history=(), status=400, message="Bad Request"
            )
        )
        client._session = session

        with pytest.raises(aiohttp.ClientResponseError):
            await client.get("https://data.example.test/resource/x.json")


class TestHTTPClientSessionManagement:
    """Session lifecycle."""

    @pytest.mark.asyncio
    async def test_session_carries_headers(self):
        client = HTTPClient(app_token="tok")
        session = client.session
        assert isinstance(session, aiohttp.ClientSession)
        assert session.headers["X-App-Token"] == "tok"
        await client.close()

    @pytest.mark.asyncio
    async def test_close_idempotent(self):
        client = HTTPClient()
        await client.close()
        await client.close()

    @pytest.mark.asyncio
    async def test_context_manager(self):
        async with HTTPClient() as client:
            assert client.session is not None
        assert client._session is None or client._session.closed
