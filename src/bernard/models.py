"""Pydantic models and shared enums for bernard.

**Configuration** -- :class:`AuthConfig` holds every tunable of the
verification client, the default providers and the optional timeouts. It is
usually built from a JSON file via :func:`~bernard.config.load_config`.

**Outcome** -- :class:`AuthenticatedUser` is what a successful
:meth:`~bernard.auth.orchestrator.AuthOrchestrator.authenticate` call
returns: the verified user payload, untouched, plus the token and the name
of the provider that produced it.
"""

from __future__ import annotations

import enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ENDPOINT = "/postback/auth"
DEFAULT_TOKEN_NAME = "_b"


class ExtensionLoadState(str, enum.Enum):
    """Lifecycle of the extension SDK. Transitions only move forward."""

    NOT_REQUESTED = "not_requested"
    INSTALLING = "installing"
    READY = "ready"


class AuthConfig(BaseModel):
    """Settings for token verification and the built-in providers.

    Example::

        AuthConfig(
            base_url="https://bot.example.com",
            endpoint="/postback/auth",
            transport="body",
            messenger_app_id="1234567890",
        )
    """

    model_config = ConfigDict(extra="forbid")

    base_url: Optional[str] = Field(
        default=None, description="Base URL prepended to the endpoint"
    )
    endpoint: str = Field(
        default=DEFAULT_ENDPOINT, description="Token verification endpoint"
    )
    transport: Literal["body", "header"] = Field(
        default="body",
        description="How the token is sent: form field 'token' or bearer header",
    )
    token_name: str = Field(
        default=DEFAULT_TOKEN_NAME,
        description="Query string / hash parameter holding the token",
    )
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    messenger_app_id: Optional[str] = Field(
        default=None, description="App ID passed to the extensions SDK"
    )
    auth_timeout: Optional[float] = Field(
        default=None,
        description="Give up on the whole race after this many seconds (None = never)",
    )
    ready_timeout: Optional[float] = Field(
        default=None,
        description="Give up waiting for the extension SDK after this many seconds",
    )


class AuthenticatedUser(BaseModel):
    """The winning verification result.

    Attributes:
        user: Payload returned by the verifier, passed through unmodified
            (the same object, not a copy).
        token: The raw token that was verified.
        provider: Name of the provider that produced the token.
    """

    user: Any
    token: str
    provider: str
