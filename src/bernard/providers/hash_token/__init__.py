"""One-shot hash-fragment token provider.

See Also:
    :class:`~bernard.providers.hash_token.provider.HashTokenProvider`
"""

from bernard.providers.hash_token.provider import HashTokenProvider

__all__ = ["HashTokenProvider"]
