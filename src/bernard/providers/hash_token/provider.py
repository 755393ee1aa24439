"""Hash-fragment token provider with replay protection.

:class:`HashTokenProvider` reads a token from the URL fragment
(``#_b=<token>``) and clears the fragment before handing the token back, so
a given token can be consumed at most once. The fragment is cleared in the
same synchronous step as the read: there is no ``await`` between the two,
so no other task can observe the value in between.
"""

from __future__ import annotations

from bernard.auth.base import TokenProvider
from bernard.exceptions import ProviderError
from bernard.location import PageLocation
from bernard.models import DEFAULT_TOKEN_NAME


class HashTokenProvider(TokenProvider):
    """Authenticate with a one-shot token carried in the hash fragment.

    Args:
        location: The page location to read from and clear.
        token_name: Fragment parameter holding the token. Defaults to ``_b``.
    """

    def __init__(self, location: PageLocation, token_name: str = DEFAULT_TOKEN_NAME) -> None:
        self._location = location
        self._token_name = token_name or DEFAULT_TOKEN_NAME

    @property
    def name(self) -> str:
        return "hash_token"

    async def acquire(self) -> str:
        """Consume the fragment token.

        Raises:
            ProviderError: If the fragment holds no token, including when an
                earlier call already consumed it.
        """
        token = self._location.get_hash_param(self._token_name)
        if not token:
            raise ProviderError(
                f'No "{self._token_name}" hash parameter found', provider=self.name
            )
        self._location.clear_hash()
        return token
