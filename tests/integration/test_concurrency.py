"""Integration tests for concurrent use of one MixpanelClient.

Many threads share a single client; the number of in-flight requests
must never exceed ``concurrent_requests``.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import httpx
import pytest

from mixpanel_admin import MixpanelClient, Project, RequestCancelledError


class InFlightCounter:
    """Mock handler that tracks the peak number of concurrent requests."""

    def __init__(self, payload: dict[str, Any], delay: float = 0.05) -> None:
        self.payload = payload
        self.delay = delay
        self.current = 0
        self.peak = 0
        self.total = 0
        self._lock = threading.Lock()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            self.current += 1
            self.total += 1
            self.peak = max(self.peak, self.current)
        time.sleep(self.delay)
        with self._lock:
            self.current -= 1
        return httpx.Response(200, json=self.payload)


@pytest.mark.parametrize("limit", [1, 3])
def test_in_flight_requests_bounded(
    mock_client_factory: Callable[..., MixpanelClient],
    timezones_payload: dict[str, Any],
    limit: int,
) -> None:
    """Twelve parallel calls never exceed the configured limit."""
    handler = InFlightCounter(timezones_payload, delay=0.02)
    client = mock_client_factory(handler, concurrent_requests=limit)

    with ThreadPoolExecutor(max_workers=12) as executor:
        futures = [executor.submit(client.list_timezones) for _ in range(12)]
        results = [f.result(timeout=10) for f in futures]

    assert handler.total == 12
    assert handler.peak <= limit
    assert all(len(r) == 3 for r in results)
    assert client.api.limiter is not None
    assert client.api.limiter.available_slots == limit


def test_unlimited_concurrency(
    mock_client_factory: Callable[..., MixpanelClient],
    timezones_payload: dict[str, Any],
) -> None:
    """concurrent_requests=0 lets every call run at once."""
    handler = InFlightCounter(timezones_payload, delay=0.1)
    client = mock_client_factory(handler, concurrent_requests=0)

    barrier = threading.Barrier(4)

    def call() -> None:
        barrier.wait(timeout=5)
        client.list_timezones()

    with ThreadPoolExecutor(max_workers=4) as executor:
        for future in [executor.submit(call) for _ in range(4)]:
            future.result(timeout=10)

    assert handler.peak > 1


def test_create_project_holds_one_slot_per_call(
    mock_client_factory: Callable[..., MixpanelClient],
    me_payload: dict[str, Any],
    timezones_payload: dict[str, Any],
) -> None:
    """Multi-step creation with capacity 1 completes without deadlocking."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/app/timezones":
            return httpx.Response(200, json=timezones_payload)
        if request.url.path == "/api/app/me":
            return httpx.Response(200, json=me_payload)
        return httpx.Response(200, json={"results": {"id": 55}})

    client = mock_client_factory(handler, concurrent_requests=1)

    with ThreadPoolExecutor(max_workers=3) as executor:
        futures = [
            executor.submit(
                client.create_project,
                Project(name=f"P{i}", domain="US", timezone="UTC"),
            )
            for i in range(3)
        ]
        created = [f.result(timeout=10) for f in futures]

    assert sorted(p.name for p in created) == ["P0", "P1", "P2"]
    assert all(p.id == 55 for p in created)


def test_cancel_queued_call(
    mock_client_factory: Callable[..., MixpanelClient],
    timezones_payload: dict[str, Any],
) -> None:
    """A call cancelled while queued raises and the client stays usable."""
    release = threading.Event()
    started = threading.Event()

    def handler(request: httpx.Request) -> httpx.Response:
        if not started.is_set():
            started.set()
            release.wait(timeout=5)
        return httpx.Response(200, json=timezones_payload)

    client = mock_client_factory(handler, concurrent_requests=1)
    cancel = threading.Event()

    with ThreadPoolExecutor(max_workers=2) as executor:
        blocker = executor.submit(client.list_timezones)
        assert started.wait(timeout=5)
        queued = executor.submit(client.list_timezones, cancel=cancel)
        time.sleep(0.1)
        cancel.set()
        with pytest.raises(RequestCancelledError):
            queued.result(timeout=5)
        release.set()
        blocker.result(timeout=5)

    assert len(client.list_timezones()) == 3
