"""
Cooperative cancellation for batch runs.

A runner never subscribes to a cancellation signal; it polls it at fixed
checkpoints. Anything that can answer "has cancellation been requested?" can
be used as a signal, so callers are free to pass their own event objects.
"""
from __future__ import annotations

import threading
from typing import Any


class CancellationToken:
    """
    A thread-safe, one-way cancellation flag.

    The owner calls `cancel()`; runners only read `cancelled`. Once set, the
    flag cannot be cleared.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def is_set(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"


def is_cancellation_requested(token: Any) -> bool:
    """
    Polls a cancellation signal.

    Accepts `None` (never cancelled), a `CancellationToken`, any object with
    an `is_set()` method (`threading.Event`, `asyncio.Event`), or any object
    with a `cancelled` attribute that is either a bool or a zero-argument
    callable (such as `asyncio.Future.cancelled`).
    """
    if token is None:
        return False
    if isinstance(token, CancellationToken):
        return token.cancelled

    is_set = getattr(token, "is_set", None)
    if callable(is_set):
        return bool(is_set())

    cancelled = getattr(token, "cancelled", None)
    if callable(cancelled):
        return bool(cancelled())
    if cancelled is not None:
        return bool(cancelled)

    raise TypeError(
        f"Unsupported cancellation token of type {type(token).__name__}; "
        "expected an object with 'is_set()' or 'cancelled'."
    )
