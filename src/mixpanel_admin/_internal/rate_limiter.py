"""Concurrency gate for outgoing Mixpanel requests.

Provides a semaphore-based limiter bounding the number of in-flight
requests per client. Acquisition can be cancelled by the caller through a
``threading.Event``; a cancelled acquisition never holds a slot.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from mixpanel_admin.exceptions import RequestCancelledError

# How often a cancellable acquisition re-checks its cancel event.
CANCEL_POLL_INTERVAL = 0.05


class RateLimiter:
    """Semaphore-based limiter for concurrent requests.

    Attributes:
        max_concurrent: Maximum number of concurrent operations allowed.

    Example:
        ```python
        limiter = RateLimiter(max_concurrent=4)
        cancel = threading.Event()

        with limiter.acquire(cancel=cancel):
            response = http.get(url)
        ```
    """

    def __init__(self, max_concurrent: int = 10) -> None:
        """Initialize the rate limiter.

        Args:
            max_concurrent: Maximum number of concurrent operations.

        Raises:
            ValueError: If max_concurrent is not positive.
        """
        if max_concurrent <= 0:
            raise ValueError("max_concurrent must be positive")

        self._max_concurrent = max_concurrent
        self._semaphore = threading.Semaphore(max_concurrent)
        self._lock = threading.Lock()
        self._in_use = 0

    @property
    def max_concurrent(self) -> int:
        """Get the maximum concurrent operations limit."""
        return self._max_concurrent

    @property
    def available_slots(self) -> int:
        """Number of slots not currently held."""
        with self._lock:
            return self._max_concurrent - self._in_use

    def _wait(self, cancel: threading.Event | None) -> None:
        if cancel is None:
            self._semaphore.acquire()
            return
        if cancel.is_set():
            raise RequestCancelledError("Request cancelled before dispatch")
        while not self._semaphore.acquire(timeout=CANCEL_POLL_INTERVAL):
            if cancel.is_set():
                raise RequestCancelledError(
                    "Request cancelled while waiting for a concurrency slot"
                )

    @contextmanager
    def acquire(self, cancel: threading.Event | None = None) -> Iterator[None]:
        """Acquire a slot for a concurrent operation.

        Context manager that acquires a semaphore slot on entry and
        releases it on exit (including on exception).

        Args:
            cancel: Optional event; setting it aborts a pending acquisition.

        Yields:
            None when a slot is acquired.

        Raises:
            RequestCancelledError: If ``cancel`` is set before a slot is
                obtained. No slot is held in that case.
        """
        self._wait(cancel)
        with self._lock:
            self._in_use += 1
        try:
            yield
        finally:
            with self._lock:
                self._in_use -= 1
            self._semaphore.release()
