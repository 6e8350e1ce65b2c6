"""Cancellable delayed callbacks on the running event loop."""

import asyncio
from collections.abc import Callable
from typing import Any


def schedule(callback: Callable[..., Any], delay: float, *args: Any) -> asyncio.TimerHandle:
    """Run callback after delay seconds on the running loop."""
    return asyncio.get_running_loop().call_later(delay, callback, *args)


class Debouncer:
    """Trailing-edge debounce.

    Each schedule() cancels the previous pending callback, so only the last
    one scheduled within the window runs.
    """

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None

    def schedule(self, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        """Schedule callback, replacing any pending one."""
        self.cancel()
        self._handle = schedule(self._fire, self.delay, callback, *args)
        return self._handle

    def _fire(self, callback: Callable[..., Any], *args: Any) -> None:
        self._handle = None
        callback(*args)

    def cancel(self) -> bool:
        """Cancel the pending callback.

        Returns:
            True if a callback was pending
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True

    @property
    def pending(self) -> bool:
        """Whether a callback is waiting to fire."""
        return self._handle is not None
