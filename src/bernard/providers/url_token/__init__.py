"""Query-string token provider.

See Also:
    :class:`~bernard.providers.url_token.provider.UrlTokenProvider`
"""

from bernard.providers.url_token.provider import UrlTokenProvider

__all__ = ["UrlTokenProvider"]
