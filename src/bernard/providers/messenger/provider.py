"""Messenger Extensions token provider.

This module provides :class:`MessengerExtensionsProvider`, which waits for
the Messenger Extensions SDK through a shared
:class:`~bernard.extensions.loader.ExtensionLoader`, asks it for the thread
context of an app and uses the context's ``signed_request`` as the token.

The SDK itself is opaque. Anything that satisfies :class:`ExtensionsSdk`
(an object with an async ``get_context(app_id)``) can be handed to
:meth:`~bernard.extensions.loader.ExtensionLoader.complete`.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from bernard.auth.base import TokenProvider
from bernard.exceptions import ExtensionTimeoutError, ProviderError
from bernard.extensions.loader import ExtensionLoader


class ExtensionsSdk(Protocol):
    """The part of the extensions SDK this provider relies on."""

    async def get_context(self, app_id: str) -> Mapping[str, Any]:
        ...


class MessengerExtensionsProvider(TokenProvider):
    """Authenticate using the Messenger Extensions thread context.

    Args:
        loader: Loader shared by everything that needs the SDK.
        app_id: The app ID passed to ``get_context``.
        ready_timeout: Seconds to wait for the SDK. ``None`` waits forever.
    """

    def __init__(
        self,
        loader: ExtensionLoader,
        app_id: str,
        ready_timeout: Optional[float] = None,
    ) -> None:
        self._loader = loader
        self._app_id = app_id
        self._ready_timeout = ready_timeout

    @property
    def name(self) -> str:
        return "messenger_extensions"

    async def acquire(self) -> str:
        """Return the ``signed_request`` of the current thread context.

        Raises:
            ProviderError: If the SDK is not ready in time, ``get_context``
                fails, or the context carries no signed request.
        """
        try:
            sdk: ExtensionsSdk = await self._loader.wait_ready(self._ready_timeout)
        except ExtensionTimeoutError as exc:
            raise ProviderError(str(exc), provider=self.name) from exc

        try:
            context = await sdk.get_context(self._app_id)
        except Exception as exc:
            raise ProviderError(
                f"Messenger Extensions getContext failed: {exc}", provider=self.name
            ) from exc

        signed_request = context.get("signed_request") if context else None
        if not signed_request:
            raise ProviderError(
                "Messenger Extensions context has no signed_request", provider=self.name
            )
        return signed_request
