"""Token verification -- exchange a raw token for a verified user.

:class:`VerificationClient` is the contract the orchestrator depends on:
one ``await verify(token)`` gives exactly one outcome, a user payload or a
:class:`~bernard.exceptions.VerificationError`.

:class:`HttpVerificationClient` is the stock implementation. It wraps
:class:`httpx.AsyncClient` and supports two interchangeable transports:

* ``"body"`` -- ``POST`` with a form-encoded ``token=<token>`` body.
* ``"header"`` -- ``POST`` with an ``Authorization: Bearer <token>`` header.

Any status other than 200, any network error, and any body that is not a
JSON object are reported as the same :class:`VerificationError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional
from urllib.parse import urlsplit

import httpx

from bernard.exceptions import ConfigurationError, VerificationError
from bernard.models import AuthConfig


class VerificationClient(ABC):
    """Exchanges a raw token for a verified identity payload."""

    @abstractmethod
    async def verify(self, token: str) -> Any:
        """Verify *token* against the backend.

        Returns:
            The verified user payload. It reaches the caller unchanged.

        Raises:
            VerificationError: If the backend rejects the token or the
                response cannot be used.
        """
        ...


class HttpVerificationClient(VerificationClient):
    """Verification over HTTP using :class:`httpx.AsyncClient`.

    Can be used as an async context manager, in which case it owns and
    closes its HTTP client. When an existing ``httpx.AsyncClient`` is passed
    in, the caller stays responsible for closing it.

    Args:
        config: Endpoint, transport and request settings.
        client: Optional pre-built HTTP client (useful for tests with
            :class:`httpx.MockTransport`).

    Raises:
        ConfigurationError: If no *client* is given and the endpoint cannot
            be resolved, i.e. ``base_url`` is unset and ``endpoint`` is a
            relative path.

    Example::

        async with HttpVerificationClient(AuthConfig(base_url=url)) as verifier:
            user = await verifier.verify("tok123")
    """

    def __init__(
        self,
        config: Optional[AuthConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config or AuthConfig()
        if client is None and not self._config.base_url:
            if not urlsplit(self._config.endpoint).scheme:
                raise ConfigurationError(
                    f"base_url is required when endpoint {self._config.endpoint!r} "
                    "is a relative path"
                )
        self._client = client
        self._owns_client = client is None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HttpVerificationClient:
        if self._client is None:
            self._client = self._build_client()
            self._owns_client = True
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this object created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Verification
    # ------------------------------------------------------------------ #

    async def verify(self, token: str) -> dict[str, Any]:
        if self._client is None:
            self._client = self._build_client()
            self._owns_client = True

        headers = {"Accept": "application/json"}
        kwargs: dict[str, Any] = {}
        if self._config.transport == "header":
            headers["Authorization"] = f"Bearer {token}"
        else:
            kwargs["data"] = {"token": token}

        try:
            response = await self._client.post(
                self._config.endpoint, headers=headers, **kwargs
            )
        except httpx.HTTPError as exc:
            raise VerificationError(f"Verification request failed: {exc}") from exc

        if response.status_code != 200:
            raise VerificationError(
                f"Verification rejected with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise VerificationError(
                "Verification response is not valid JSON",
                status_code=response.status_code,
            ) from exc

        if not isinstance(payload, dict):
            raise VerificationError(
                "Verification response is not a JSON object",
                status_code=response.status_code,
            )
        return payload

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._config.base_url or "",
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
        )
