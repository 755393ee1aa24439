"""Auth orchestrator -- race token providers, keep the first verified token.

:class:`AuthOrchestrator` turns several independent, unordered token
sources into one outcome:

1. Every provider's :meth:`~bernard.auth.base.TokenProvider.acquire` is
   started at once, each in its own task.
2. Each non-empty token is sent to the
   :class:`~bernard.client.verification.VerificationClient` as soon as it
   arrives.
3. The first verification to succeed settles the call. Results that come
   in later are discarded; nothing is cancelled.
4. A provider failure, an empty token and a rejected token all count as one
   failure. When every provider has failed, the call settles with
   :class:`~bernard.exceptions.AggregateAuthError`.

Settlement is guarded by :attr:`AuthAttempt.settled`, which is checked and
set in plain synchronous code between two ``await`` points so no two
completions can both settle the same call.

See Also:
    :func:`get_user` for a one-call helper that builds the HTTP verifier
    from an :class:`~bernard.models.AuthConfig`.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Coroutine, Iterable, Optional

from bernard.auth.base import TokenProvider
from bernard.client.verification import HttpVerificationClient, VerificationClient
from bernard.exceptions import (
    AggregateAuthError,
    AuthTimeoutError,
    ConfigurationError,
    ProviderError,
    VerificationError,
)
from bernard.models import AuthConfig, AuthenticatedUser
from bernard.result import capture

logger = logging.getLogger(__name__)

ALL_FAILED_MESSAGE = "All auth backend failed"

_background_tasks: set[asyncio.Task[Any]] = set()


@dataclass
class AuthAttempt:
    """Bookkeeping for a single :meth:`AuthOrchestrator.authenticate` call."""

    total: int
    failed: int = 0
    settled: bool = False
    errors: list[Exception] = field(default_factory=list)


class AuthOrchestrator:
    """Races token providers and settles on the first verified token.

    Args:
        verifier: Exchanges raw tokens for verified users.
        timeout: Optional number of seconds after which an unsettled call
            raises :class:`~bernard.exceptions.AuthTimeoutError`. Work still
            in flight keeps running and its results are discarded.

    Example::

        orchestrator = AuthOrchestrator(verifier)
        result = await orchestrator.authenticate([
            HashTokenProvider(location),
            UrlTokenProvider(location),
        ])
        print(result.user, result.provider)
    """

    def __init__(
        self,
        verifier: VerificationClient,
        timeout: Optional[float] = None,
    ) -> None:
        self._verifier = verifier
        self._timeout = timeout
        self._tasks: set[asyncio.Task[Any]] = set()
        self._verifications: set[asyncio.Task[Any]] = set()

    @property
    def in_flight(self) -> int:
        """Number of provider and verification tasks still running."""
        return len(self._tasks)

    async def authenticate(self, providers: Iterable[TokenProvider]) -> AuthenticatedUser:
        """Run every provider concurrently and return the first verified user.

        Args:
            providers: The strategies to race. Order does not matter.

        Returns:
            The verified user together with the winning token and provider.

        Raises:
            ConfigurationError: If *providers* is empty.
            AggregateAuthError: If every provider or verification failed.
            AuthTimeoutError: If a timeout is configured and elapsed first.
        """
        providers = list(providers)
        if not providers:
            raise ConfigurationError("No auth providers configured")

        loop = asyncio.get_running_loop()
        attempt = AuthAttempt(total=len(providers))
        outcome: asyncio.Future[AuthenticatedUser] = loop.create_future()

        for provider in providers:
            self._spawn(self._run_provider(provider, attempt, outcome))

        try:
            if self._timeout is None:
                return await outcome
            try:
                return await asyncio.wait_for(outcome, self._timeout)
            except asyncio.TimeoutError as exc:
                raise AuthTimeoutError(
                    f"Authentication did not settle within {self._timeout}s"
                ) from exc
        finally:
            # Timed out or cancelled callers count as settled too.
            attempt.settled = True

    async def join(self, verifications_only: bool = False) -> None:
        """Wait for in-flight work started by this orchestrator.

        Nothing is cancelled. Provider tasks that never finish make this
        wait forever, so pass ``verifications_only=True`` to wait only for
        verification round-trips.
        """
        pending = self._verifications if verifications_only else self._tasks
        while pending:
            await asyncio.gather(*list(pending), return_exceptions=True)

    # ------------------------------------------------------------------ #
    # Completion handlers
    # ------------------------------------------------------------------ #

    async def _run_provider(
        self,
        provider: TokenProvider,
        attempt: AuthAttempt,
        outcome: asyncio.Future[AuthenticatedUser],
    ) -> None:
        acquired = await capture(provider.acquire)
        if not acquired.ok:
            self._fail(attempt, outcome, provider, acquired.error)
            return

        token = acquired.value
        if not token:
            self._fail(
                attempt,
                outcome,
                provider,
                ProviderError(f"Provider '{provider.name}' returned an empty token", provider.name),
            )
            return

        if attempt.settled:
            logger.debug("Not verifying token from %s: already settled", provider.name)
            return

        task = self._spawn(self._run_verification(provider, token, attempt, outcome))
        self._verifications.add(task)
        task.add_done_callback(self._verifications.discard)

    async def _run_verification(
        self,
        provider: TokenProvider,
        token: str,
        attempt: AuthAttempt,
        outcome: asyncio.Future[AuthenticatedUser],
    ) -> None:
        verified = await capture(self._verifier.verify, token)
        if not verified.ok:
            self._fail(attempt, outcome, provider, verified.error)
            return

        if attempt.settled:
            logger.debug("Discarding late verification from %s", provider.name)
            return

        try:
            result = AuthenticatedUser(user=verified.value, token=token, provider=provider.name)
        except Exception as exc:
            self._fail(attempt, outcome, provider, exc)
            return

        attempt.settled = True
        if not outcome.done():
            outcome.set_result(result)
        logger.debug("Authenticated via %s", provider.name)

    def _fail(
        self,
        attempt: AuthAttempt,
        outcome: asyncio.Future[AuthenticatedUser],
        provider: TokenProvider,
        error: Exception,
    ) -> None:
        attempt.failed += 1
        attempt.errors.append(error)

        if isinstance(error, (ProviderError, VerificationError)):
            logger.debug("Auth via %s failed: %s", provider.name, error)
        else:
            logger.warning(
                "Provider %s raised an unexpected error: %s",
                provider.name,
                error,
                exc_info=error,
            )

        if attempt.failed == attempt.total and not attempt.settled:
            attempt.settled = True
            if not outcome.done():
                outcome.set_exception(AggregateAuthError(ALL_FAILED_MESSAGE, attempt.errors))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task


async def get_user(
    providers: Iterable[TokenProvider],
    config: Optional[AuthConfig] = None,
    verifier: Optional[VerificationClient] = None,
) -> AuthenticatedUser:
    """Authenticate with *providers* in a single call.

    When no *verifier* is given, an
    :class:`~bernard.client.verification.HttpVerificationClient` is built
    from *config* (default endpoint ``/postback/auth``). It is closed in the
    background once every verification it started has finished, so losing
    requests still run to completion.

    Args:
        providers: The strategies to race.
        config: Verification and timeout settings.
        verifier: Use this verifier instead of building one.

    Returns:
        The first verified user.

    Raises:
        ConfigurationError: If *providers* is empty, or if the HTTP verifier
            has to be built and ``config.base_url`` is unset while the
            endpoint is relative. Nothing is started in that case.
        AggregateAuthError: If every attempt failed.
        AuthTimeoutError: If ``config.auth_timeout`` elapsed first.
    """
    config = config or AuthConfig()
    if verifier is not None:
        return await AuthOrchestrator(verifier, timeout=config.auth_timeout).authenticate(
            providers
        )

    http_verifier = HttpVerificationClient(config)
    orchestrator = AuthOrchestrator(http_verifier, timeout=config.auth_timeout)
    try:
        return await orchestrator.authenticate(providers)
    finally:
        task = asyncio.get_running_loop().create_task(
            _close_when_idle(orchestrator, http_verifier)
        )
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)


async def _close_when_idle(
    orchestrator: AuthOrchestrator, verifier: HttpVerificationClient
) -> None:
    await orchestrator.join(verifications_only=True)
    await verifier.aclose()
