"""Debounced delayed calls with last-write-wins semantics."""

import asyncio

from .config import RESAMPLE_DEBOUNCE_SECONDS


def asyncio_scheduler(delay: float, callback):
    """Schedule `callback` on the running event loop. Returns a cancellable handle."""
    loop = asyncio.get_event_loop()
    return loop.call_later(delay, callback)


class Debouncer:
    """Runs only the most recent submitted call, once input has been quiet for `delay` seconds.

    `scheduler(delay, callback)` must return an object with a `cancel()` method.
    """

    def __init__(self, delay: float = RESAMPLE_DEBOUNCE_SECONDS, scheduler=asyncio_scheduler):
        self.delay = delay
        self.scheduler = scheduler
        self._handle = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def submit(self, func, *args, **kwargs) -> None:
        """Schedule func(*args, **kwargs), superseding any call still waiting."""
        self.cancel()

        def fire():
            self._handle = None
            func(*args, **kwargs)

        self._handle = self.scheduler(self.delay, fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
