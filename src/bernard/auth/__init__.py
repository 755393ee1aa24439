"""Multi-strategy authentication for bernard.

The main entry points are:

- :class:`TokenProvider` -- abstract base class for token strategies.
- :class:`AuthOrchestrator` -- races providers and verifies the first
  usable token.
- :func:`get_user` -- one-call helper that builds an HTTP verifier from an
  :class:`~bernard.models.AuthConfig`.

Typical usage::

    from bernard.auth import get_user
    from bernard.providers import create_default_providers

    result = await get_user(create_default_providers(location, loader, config), config)
    # result.user is the verified user payload
"""

from bernard.auth.base import TokenProvider
from bernard.auth.orchestrator import AuthAttempt, AuthOrchestrator, get_user

__all__ = ["AuthAttempt", "AuthOrchestrator", "TokenProvider", "get_user"]
