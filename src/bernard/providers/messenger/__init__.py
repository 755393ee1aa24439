"""Messenger Extensions token provider.

See Also:
    :class:`~bernard.providers.messenger.provider.MessengerExtensionsProvider`
"""

from bernard.providers.messenger.provider import ExtensionsSdk, MessengerExtensionsProvider

__all__ = ["ExtensionsSdk", "MessengerExtensionsProvider"]
