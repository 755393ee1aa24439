"""Tests for the HTTP verification client."""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from bernard.client.verification import HttpVerificationClient
from bernard.exceptions import ConfigurationError, VerificationError
from bernard.models import AuthConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


BASE_URL = "https://bot.example.com"


def _client_from_handler(
    handler: Callable[[httpx.Request], httpx.Response],
) -> httpx.AsyncClient:
    """Create an httpx.AsyncClient backed by a MockTransport."""
    return httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))


def _recording_handler(
    seen: list[httpx.Request], response: httpx.Response
) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return response

    return handler


def _json_response(data: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code=status_code, json=data)


# ---------------------------------------------------------------------------
# Transports
# ---------------------------------------------------------------------------


class TestBodyTransport:
    @pytest.mark.asyncio
    async def test_posts_form_encoded_token(self) -> None:
        seen: list[httpx.Request] = []
        client = _client_from_handler(_recording_handler(seen, _json_response({"id": 42})))
        verifier = HttpVerificationClient(AuthConfig(), client=client)

        user = await verifier.verify("abc")

        assert user == {"id": 42}
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/postback/auth"
        assert request.content == b"token=abc"
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        assert request.headers["accept"] == "application/json"
        assert "authorization" not in request.headers

    @pytest.mark.asyncio
    async def test_token_is_url_encoded(self) -> None:
        seen: list[httpx.Request] = []
        client = _client_from_handler(_recording_handler(seen, _json_response({"id": 1})))
        verifier = HttpVerificationClient(AuthConfig(), client=client)

        await verifier.verify("a+b&c=d")

        assert seen[0].content == b"token=a%2Bb%26c%3Dd"

    @pytest.mark.asyncio
    async def test_custom_endpoint(self) -> None:
        seen: list[httpx.Request] = []
        client = _client_from_handler(_recording_handler(seen, _json_response({"id": 1})))
        verifier = HttpVerificationClient(AuthConfig(endpoint="/api/auth"), client=client)

        await verifier.verify("abc")

        assert seen[0].url.path == "/api/auth"


class TestHeaderTransport:
    @pytest.mark.asyncio
    async def test_sends_bearer_header(self) -> None:
        seen: list[httpx.Request] = []
        client = _client_from_handler(_recording_handler(seen, _json_response({"id": 7})))
        verifier = HttpVerificationClient(AuthConfig(transport="header"), client=client)

        user = await verifier.verify("abc")

        assert user == {"id": 7}
        assert seen[0].headers["authorization"] == "Bearer abc"
        assert seen[0].content == b""


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [201, 204, 400, 401, 403, 404, 500, 503])
    async def test_non_200_status(self, status: int) -> None:
        client = _client_from_handler(lambda r: _json_response({"id": 1}, status_code=status))
        verifier = HttpVerificationClient(AuthConfig(), client=client)

        with pytest.raises(VerificationError) as exc_info:
            await verifier.verify("abc")
        assert exc_info.value.status_code == status

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        client = _client_from_handler(lambda r: httpx.Response(200, text="<html>nope</html>"))
        verifier = HttpVerificationClient(AuthConfig(), client=client)

        with pytest.raises(VerificationError, match="not valid JSON"):
            await verifier.verify("abc")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [[1, 2], "user", 42, True])
    async def test_json_that_is_not_an_object(self, body: Any) -> None:
        client = _client_from_handler(lambda r: _json_response(body))
        verifier = HttpVerificationClient(AuthConfig(), client=client)

        with pytest.raises(VerificationError, match="not a JSON object"):
            await verifier.verify("abc")

    @pytest.mark.asyncio
    async def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        verifier = HttpVerificationClient(AuthConfig(), client=_client_from_handler(handler))

        with pytest.raises(VerificationError, match="connection refused") as exc_info:
            await verifier.verify("abc")
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


# ---------------------------------------------------------------------------
# Client lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_context_manager_builds_and_closes_client(self) -> None:
        verifier = HttpVerificationClient(AuthConfig(base_url=BASE_URL))
        assert verifier._client is None

        async with verifier:
            inner = verifier._client
            assert isinstance(inner, httpx.AsyncClient)
            assert str(inner.base_url).startswith(BASE_URL)

        assert verifier._client is None
        assert inner.is_closed

    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self) -> None:
        client = _client_from_handler(lambda r: _json_response({"id": 1}))
        async with HttpVerificationClient(AuthConfig(), client=client) as verifier:
            await verifier.verify("abc")

        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_verify_without_context_manager_builds_client(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        built: list[httpx.AsyncClient] = []

        def build_client(self: HttpVerificationClient) -> httpx.AsyncClient:
            client = _client_from_handler(lambda r: _json_response({"id": 1}))
            built.append(client)
            return client

        monkeypatch.setattr(HttpVerificationClient, "_build_client", build_client)
        verifier = HttpVerificationClient(AuthConfig(base_url=BASE_URL))

        await verifier.verify("a")
        await verifier.verify("b")
        await verifier.aclose()

        assert len(built) == 1
        assert built[0].is_closed


class TestEndpointResolution:
    def test_relative_endpoint_without_base_url_is_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="base_url is required"):
            HttpVerificationClient(AuthConfig())

    def test_absolute_endpoint_without_base_url(self) -> None:
        config = AuthConfig(endpoint="https://bot.example.com/postback/auth")
        HttpVerificationClient(config)

    def test_injected_client_supplies_base_url(self) -> None:
        client = _client_from_handler(lambda r: _json_response({"id": 1}))
        HttpVerificationClient(AuthConfig(), client=client)

    @pytest.mark.asyncio
    async def test_absolute_endpoint_is_requested(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        seen: list[httpx.Request] = []

        def build_client(self: HttpVerificationClient) -> httpx.AsyncClient:
            return httpx.AsyncClient(
                transport=httpx.MockTransport(_recording_handler(seen, _json_response({"id": 1})))
            )

        monkeypatch.setattr(HttpVerificationClient, "_build_client", build_client)
        config = AuthConfig(endpoint="https://auth.example.com/check")

        async with HttpVerificationClient(config) as verifier:
            assert await verifier.verify("abc") == {"id": 1}

        assert str(seen[0].url) == "https://auth.example.com/check"
