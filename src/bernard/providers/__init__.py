"""Built-in token providers.

- ``url_token`` -- token in the query string (static).
- ``hash_token`` -- token in the hash fragment (consumed once).
- ``messenger_extensions`` -- signed request from the Messenger Extensions SDK.

:func:`create_default_providers` returns the set a page normally races.
"""

from __future__ import annotations

from typing import Optional

from bernard.auth.base import TokenProvider
from bernard.extensions.loader import ExtensionLoader
from bernard.location import PageLocation
from bernard.models import AuthConfig
from bernard.providers.hash_token import HashTokenProvider
from bernard.providers.messenger import MessengerExtensionsProvider
from bernard.providers.url_token import UrlTokenProvider

__all__ = [
    "HashTokenProvider",
    "MessengerExtensionsProvider",
    "UrlTokenProvider",
    "create_default_providers",
]


def create_default_providers(
    location: PageLocation,
    loader: Optional[ExtensionLoader] = None,
    config: Optional[AuthConfig] = None,
) -> list[TokenProvider]:
    """Build the providers a page races by default.

    The hash and query-string providers are always included. The Messenger
    Extensions provider is added only when both a *loader* and
    ``config.messenger_app_id`` are available.

    Args:
        location: The page location both URL-based providers read from.
        loader: The shared extension loader, if the page uses the SDK.
        config: Token parameter name, app ID and SDK timeout.

    Returns:
        A fresh list of providers.
    """
    config = config or AuthConfig()
    providers: list[TokenProvider] = [
        HashTokenProvider(location, config.token_name),
        UrlTokenProvider(location, config.token_name),
    ]
    if loader is not None and config.messenger_app_id:
        providers.append(
            MessengerExtensionsProvider(
                loader, config.messenger_app_id, ready_timeout=config.ready_timeout
            )
        )
    return providers
