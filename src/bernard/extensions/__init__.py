"""Lazily-installed external extensions SDK.

See :class:`~bernard.extensions.loader.ExtensionLoader`.
"""

from bernard.extensions.loader import ExtensionLoader

__all__ = ["ExtensionLoader"]
