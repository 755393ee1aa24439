"""Load-once bootstrap for an external extensions SDK.

:class:`ExtensionLoader` makes sure the SDK is requested at most once per
application context and that every caller of :meth:`~ExtensionLoader.ready`
receives the SDK object exactly once, whether it asked before or after the
SDK finished loading.

State machine::

    NOT_REQUESTED --ready()--> INSTALLING --complete()--> READY

Callbacks registered while ``INSTALLING`` are queued and drained in FIFO
order when :meth:`~ExtensionLoader.complete` is called. Callbacks are always
scheduled on the event loop with ``loop.call_soon`` and never run inline,
so callers see the same ordering whether the SDK was already loaded or not.

The loader does not know how the SDK gets installed or how it reports
completion. Both are supplied by the embedding application: ``install`` is
any callable (plain or returning an awaitable) and the SDK's load hook must
call :meth:`~ExtensionLoader.complete` with the SDK object. Both
:meth:`~ExtensionLoader.ready` and :meth:`~ExtensionLoader.complete` must
run on the event loop thread; from another thread use
``loop.call_soon_threadsafe(loader.complete, sdk)``.

Example::

    loader = ExtensionLoader(install=inject_sdk_script)
    sdk = await loader.wait_ready()
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

from bernard.exceptions import ExtensionTimeoutError
from bernard.models import ExtensionLoadState

logger = logging.getLogger(__name__)

ReadyCallback = Callable[[Any], Any]


class ExtensionLoader:
    """Installs an external SDK once and fans out its readiness.

    Args:
        install: Side effect that starts loading the SDK. Called at most
            once. May return an awaitable, which is run as a task.
        prior_init: An init hook that was already registered by the page
            before the loader took over. It is queued ahead of every other
            callback on first install so it still sees the SDK.
    """

    def __init__(
        self,
        install: Callable[[], Any],
        prior_init: Optional[ReadyCallback] = None,
    ) -> None:
        self._install = install
        self._prior_init = prior_init
        self._state = ExtensionLoadState.NOT_REQUESTED
        self._payload: Any = None
        self._queue: list[ReadyCallback] = []
        self._install_task: Optional[asyncio.Future[Any]] = None

    @property
    def state(self) -> ExtensionLoadState:
        return self._state

    @property
    def payload(self) -> Any:
        """The SDK object, or ``None`` until :meth:`complete` was called."""
        return self._payload

    @property
    def pending(self) -> int:
        """Number of callbacks waiting for the SDK."""
        return len(self._queue)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def ready(self, on_ready: ReadyCallback) -> None:
        """Register *on_ready* to be called with the SDK object.

        Triggers installation on the first call. Must be called from a
        running event loop.

        Args:
            on_ready: Called once, asynchronously, with the SDK object.
        """
        loop = asyncio.get_running_loop()

        if self._state is ExtensionLoadState.READY:
            loop.call_soon(on_ready, self._payload)
            return

        if self._state is ExtensionLoadState.INSTALLING:
            self._queue.append(on_ready)
            return

        # NOT_REQUESTED: queue first so a synchronous completion from the
        # installer still finds every waiter.
        self._state = ExtensionLoadState.INSTALLING
        if self._prior_init is not None:
            self._queue.append(self._prior_init)
        self._queue.append(on_ready)
        self._start_install()

    def complete(self, payload: Any) -> None:
        """Signal that the SDK finished loading.

        Moves to ``READY``, caches *payload* and drains the wait queue in
        registration order. Calls after the first are ignored.

        Args:
            payload: The SDK object handed to every waiting callback.
        """
        if self._state is ExtensionLoadState.READY:
            logger.debug("Extension SDK completion signalled again; ignoring")
            return

        # Raises before any state changes so queued waiters survive misuse.
        loop = asyncio.get_running_loop() if self._queue else None

        self._state = ExtensionLoadState.READY
        self._payload = payload

        waiting, self._queue = self._queue, []
        if loop is None:
            return
        for callback in waiting:
            loop.call_soon(callback, payload)

    async def wait_ready(self, timeout: Optional[float] = None) -> Any:
        """Await the SDK object.

        Args:
            timeout: Seconds to wait before giving up. ``None`` waits
                forever.

        Returns:
            The SDK object passed to :meth:`complete`.

        Raises:
            ExtensionTimeoutError: If *timeout* elapsed first.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()

        def _resolve(payload: Any) -> None:
            if not future.done():
                future.set_result(payload)

        self.ready(_resolve)

        if timeout is None:
            return await future
        try:
            return await asyncio.wait_for(future, timeout)
        except asyncio.TimeoutError as exc:
            raise ExtensionTimeoutError(
                f"Extension SDK not ready after {timeout}s"
            ) from exc

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _start_install(self) -> None:
        """Run the install side effect, scheduling it if it is a coroutine."""
        result = self._install()
        if inspect.isawaitable(result):
            self._install_task = asyncio.ensure_future(result)
            self._install_task.add_done_callback(self._on_install_done)

    def _on_install_done(self, task: asyncio.Future[Any]) -> None:
        if task.cancelled():
            logger.warning("Extension SDK installation was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Extension SDK installation failed: %s", exc, exc_info=exc)
