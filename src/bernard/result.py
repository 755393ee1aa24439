"""Tagged success/failure values for asynchronous completions.

Every provider acquisition and every verification round-trip ends in
exactly one :class:`Success` or :class:`Failure`. The orchestrator only
ever branches on these two shapes, which keeps the "one terminal outcome"
rule in a single place (:func:`capture`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """A completed operation and its value."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """A failed operation and the exception that ended it."""

    error: Exception

    @property
    def ok(self) -> bool:
        return False


Result = Union[Success[T], Failure]


async def capture(func: Callable[..., Awaitable[Any]], *args: Any) -> Result[Any]:
    """Call ``func(*args)``, await it and wrap the outcome.

    Exceptions raised while calling *func* or while awaiting its result both
    become a :class:`Failure`. Cancellation and other ``BaseException``
    subclasses are not caught.
    """
    try:
        value = await func(*args)
    except Exception as exc:
        return Failure(exc)
    return Success(value)
