"""Abstract base class for token providers.

A :class:`TokenProvider` is one strategy for obtaining a raw token: read it
from the query string, from the hash fragment, from an extensions SDK, and
so on. Providers share no state with one another and are raced against each
other by :class:`~bernard.auth.orchestrator.AuthOrchestrator`.

To implement a new strategy, subclass :class:`TokenProvider`, set the
:attr:`~TokenProvider.name` property, and implement
:meth:`~TokenProvider.acquire`.

See Also:
    :mod:`bernard.auth.orchestrator` for how providers are raced.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class TokenProvider(ABC):
    """Abstract base class for token acquisition strategies."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return a short identifier for this provider (e.g. ``"url_token"``).

        The name is reported back as provenance in
        :class:`~bernard.models.AuthenticatedUser` and used in log messages.
        """
        ...

    @abstractmethod
    async def acquire(self) -> str:
        """Obtain a raw token.

        Returns:
            The token string. An empty string is treated by the
            orchestrator as a failure.

        Raises:
            ProviderError: If no token can be produced.
        """
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
