"""Exception hierarchy for bernard.

All exceptions inherit from :class:`BernardError`. Only a few of them ever
reach the caller of :meth:`~bernard.auth.orchestrator.AuthOrchestrator.authenticate`:
individual provider and verification failures are counted by the
orchestrator and recovered locally, and only total exhaustion is surfaced.

Subclass hierarchy::

    BernardError
    +-- ConfigurationError     (no providers, invalid config file)
    +-- ProviderError          (one strategy produced no token)
    +-- VerificationError      (backend rejected a token)
    +-- AggregateAuthError     (every strategy failed)
    +-- AuthTimeoutError       (orchestration timeout, opt-in)
    +-- ExtensionTimeoutError  (extension SDK never became ready, opt-in)
"""

from __future__ import annotations

from typing import Optional, Sequence


class BernardError(Exception):
    """Base exception for all bernard errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(BernardError):
    """Raised when no providers are supplied or the configuration is invalid."""


class ProviderError(BernardError):
    """Raised by a token provider that could not produce a token.

    Args:
        message: Human-readable error description.
        provider: Name of the provider that failed, if known.
    """

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class VerificationError(BernardError):
    """Raised when the verification endpoint rejects a token.

    Non-200 statuses, network failures and malformed bodies all map to this
    one type. The status code is kept for diagnostics only.

    Args:
        message: Human-readable error description.
        status_code: HTTP status returned by the endpoint, when there was one.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AggregateAuthError(BernardError):
    """Raised when every provider, or every verification attempt, failed.

    Args:
        message: Human-readable error description.
        errors: The individual failures, in completion order.
    """

    def __init__(self, message: str, errors: Sequence[BaseException] = ()):
        super().__init__(message)
        self.errors = list(errors)


class AuthTimeoutError(BernardError):
    """Raised when an orchestration with a timeout did not settle in time."""


class ExtensionTimeoutError(BernardError):
    """Raised when the extension SDK did not become ready in time."""
