"""Cooperative cancellation token implementation.

Exposes the ``CancellationToken`` class threaded through every generation
call. Besides polling (``raise_if_cancelled``) the token supports callback
registration and an asyncio bridge (``run`` / ``sleep``) so that a pending
network read, a timeout wait or a retry backoff is interrupted the moment
cancellation is requested.
"""

from __future__ import annotations

import asyncio
from threading import Lock
from typing import Awaitable, Callable, List, TypeVar

from .state import State
from .cancelled_error import CancelledError

T = TypeVar("T")

DEFAULT_REASON = "request cancelled"


class CancellationToken:
    """A cooperative cancellation token with optional cascading semantics.

    Thread-safe for ``cancel`` + ``raise_if_cancelled`` usage, so a UI thread
    may cancel a call running on the event loop. Child tokens inherit
    cancellation when the parent is cancelled.
    """

    def __init__(self, *, parent: "CancellationToken | None" = None) -> None:
        self._state = State()
        self._lock = Lock()
        self._children: List[CancellationToken] = []
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cooperative cancellation, run callbacks and cascade to children."""
        with self._lock:
            if self._state.cancelled:
                return
            self._state.cancelled = True
            self._state.reason = reason
            callbacks = list(self._state.callbacks.values())
            self._state.callbacks.clear()
            children = list(self._children)
        for callback in callbacks:
            callback()
        for child in children:
            child.cancel(reason)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Link a child token so parent cancellation cascades (returns child)."""
        with self._lock:
            self._children.append(token)
            should_cancel = self._state.cancelled
            reason = self._state.reason
        if should_cancel:
            token.cancel(reason)
        return token

    def child(self) -> "CancellationToken":
        """Create and link a child token (shortcut)."""
        return CancellationToken(parent=self)

    def add_callback(self, callback: Callable[[], None]) -> int:
        """Register ``callback`` to run on cancel; runs immediately if already cancelled.

        Returns a handle for :meth:`remove_callback` (``-1`` when run eagerly).
        """
        with self._lock:
            if not self._state.cancelled:
                handle = self._state.next_handle
                self._state.next_handle += 1
                self._state.callbacks[handle] = callback
                return handle
        callback()
        return -1

    def remove_callback(self, handle: int) -> None:
        """Unregister a callback previously added with :meth:`add_callback`."""
        with self._lock:
            self._state.callbacks.pop(handle, None)

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if token is cancelled."""
        if self._state.cancelled:
            raise CancelledError(self._state.reason or DEFAULT_REASON)

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` in a task that is cancelled when the token fires.

        Cancellation surfaces as :class:`CancelledError`, whichever suspension
        point the task was waiting on (network read, timeout, sleep).
        """
        self.raise_if_cancelled()
        loop = asyncio.get_running_loop()
        task = asyncio.ensure_future(awaitable)
        handle = self.add_callback(lambda: loop.call_soon_threadsafe(task.cancel))
        try:
            return await task
        except asyncio.CancelledError:
            if self._state.cancelled:
                raise CancelledError(self._state.reason or DEFAULT_REASON) from None
            raise
        finally:
            self.remove_callback(handle)

    async def sleep(self, seconds: float) -> None:
        """Sleep for ``seconds`` unless cancelled first (then raise ``CancelledError``)."""
        await self.run(asyncio.sleep(max(0.0, seconds)))

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationToken(cancelled={self._state.cancelled}, "
            f"reason={self._state.reason!r}, children={len(self._children)})"
        )


__all__ = ["CancellationToken"]
