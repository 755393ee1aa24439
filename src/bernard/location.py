"""Mutable page location and the parameter lookups the providers need.

:class:`PageLocation` plays the part of the browser's ``window.location``:
it holds the current URL, exposes its query string and hash fragment, and
lets the hash-based provider clear the fragment once a token has been read
from it.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import quote, unquote, urlsplit, urlunsplit


def _find_param(source: str, key: str, separators: str) -> Optional[str]:
    """Return the first decoded value of *key* in *source*, or ``None``."""
    pattern = "[" + re.escape(separators) + "]" + re.escape(quote(key, safe="")) + "=([^&]*)"
    match = re.search(pattern, source)
    if match is None:
        return None
    return unquote(match.group(1))


class PageLocation:
    """The URL a client was opened with.

    Args:
        url: Absolute or relative URL, e.g. ``"https://bot.example.com/app?_b=tok"``.
    """

    def __init__(self, url: str = "") -> None:
        self._url = url

    def __repr__(self) -> str:
        return f"PageLocation({self._url!r})"

    @property
    def url(self) -> str:
        return self._url

    @property
    def search(self) -> str:
        """The query string including its leading ``?``, or ``""``."""
        query = urlsplit(self._url).query
        return f"?{query}" if query else ""

    @property
    def hash(self) -> str:
        """The fragment including its leading ``#``, or ``""``."""
        fragment = urlsplit(self._url).fragment
        return f"#{fragment}" if fragment else ""

    def get_qs_param(self, key: str) -> Optional[str]:
        """Return the first value for *key* in the query string."""
        return _find_param(self.search, key, "?&")

    def get_hash_param(self, key: str) -> Optional[str]:
        """Return the first value for *key* in the hash fragment."""
        return _find_param(self.hash, key, "#&")

    def clear_hash(self) -> None:
        """Drop the fragment from the URL."""
        parts = urlsplit(self._url)
        self._url = urlunsplit(parts._replace(fragment=""))
