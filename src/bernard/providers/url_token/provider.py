"""Query-string token provider.

This module provides :class:`UrlTokenProvider`, which reads a token from a
query-string parameter of the page URL (``?_b=<token>`` by default). The
source is static: every :meth:`~UrlTokenProvider.acquire` sees the same
value.

See Also:
    :class:`~bernard.providers.hash_token.provider.HashTokenProvider` for
    the one-shot, fragment-based variant.
"""

from __future__ import annotations

from bernard.auth.base import TokenProvider
from bernard.exceptions import ProviderError
from bernard.location import PageLocation
from bernard.models import DEFAULT_TOKEN_NAME


class UrlTokenProvider(TokenProvider):
    """Authenticate with a token passed in the query string.

    Args:
        location: The page location to read from.
        token_name: Query parameter holding the token. Defaults to ``_b``.
    """

    def __init__(self, location: PageLocation, token_name: str = DEFAULT_TOKEN_NAME) -> None:
        self._location = location
        self._token_name = token_name or DEFAULT_TOKEN_NAME

    @property
    def name(self) -> str:
        return "url_token"

    async def acquire(self) -> str:
        """Return the query-string token.

        Raises:
            ProviderError: If the parameter is missing or empty.
        """
        token = self._location.get_qs_param(self._token_name)
        if not token:
            raise ProviderError(
                f'No "{self._token_name}" QS parameter found', provider=self.name
            )
        return token
