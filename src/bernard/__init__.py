"""bernard -- authenticate a client by racing pluggable token providers.

Several independent strategies (query-string token, one-shot hash token,
Messenger Extensions signed request, ...) are started at once. Every token
they produce is verified against the backend, and the first verification to
succeed wins.

Typical usage::

    from bernard import AuthConfig, ExtensionLoader, PageLocation, get_user
    from bernard.providers import create_default_providers

    config = AuthConfig(base_url="https://bot.example.com")
    providers = create_default_providers(PageLocation(url), loader, config)
    result = await get_user(providers, config)

Modules:
    auth: Provider contract and the orchestrator.
    client: Verification clients.
    extensions: Load-once extensions SDK bootstrap.
    providers: Built-in token providers.
    models: Pydantic models and enums.
    config: JSON configuration loading.
    exceptions: Exception hierarchy.
"""

from bernard.auth import AuthOrchestrator, TokenProvider, get_user
from bernard.client import HttpVerificationClient, VerificationClient
from bernard.exceptions import (
    AggregateAuthError,
    AuthTimeoutError,
    BernardError,
    ConfigurationError,
    ExtensionTimeoutError,
    ProviderError,
    VerificationError,
)
from bernard.extensions import ExtensionLoader
from bernard.location import PageLocation
from bernard.models import AuthConfig, AuthenticatedUser, ExtensionLoadState

__version__ = "0.1.0"

__all__ = [
    "AggregateAuthError",
    "AuthConfig",
    "AuthOrchestrator",
    "AuthTimeoutError",
    "AuthenticatedUser",
    "BernardError",
    "ConfigurationError",
    "ExtensionLoadState",
    "ExtensionLoader",
    "ExtensionTimeoutError",
    "HttpVerificationClient",
    "PageLocation",
    "ProviderError",
    "TokenProvider",
    "VerificationClient",
    "VerificationError",
    "get_user",
]
