"""Shared fixtures for mixpanel_admin tests."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
import pytest
from hypothesis import Phase, Verbosity, settings

# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "default",
    max_examples=100,
    verbosity=Verbosity.normal,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)

settings.register_profile(
    "ci",
    max_examples=200,
    verbosity=Verbosity.normal,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
    derandomize=True,
)

settings.register_profile(
    "dev",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))

if TYPE_CHECKING:
    from mixpanel_admin._internal.config import Credentials
    from mixpanel_admin.client import MixpanelClient

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove environment variables that would leak into credential resolution."""
    for name in (
        "MIXPANEL_SERVICE_ACCOUNT_USERNAME",
        "MIXPANEL_SERVICE_ACCOUNT_SECRET",
        "MIXPANEL_ADMIN_CONFIG",
        "MIXPANEL_HOST_URL",
        "MIXPANEL_CONCURRENT_REQUESTS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_path(temp_dir: Path) -> Path:
    """Return path for a temporary config file."""
    return temp_dir / "config.toml"


@pytest.fixture
def test_credentials() -> Credentials:
    """Create test credentials."""
    from mixpanel_admin._internal.config import Credentials

    return Credentials.from_values("test_user", "test_secret")


# =============================================================================
# Response payload helpers
# =============================================================================


def envelope(results: Any) -> dict[str, Any]:
    """Wrap results in Mixpanel's standard response envelope."""
    return {"status": "ok", "results": results}


@pytest.fixture
def me_payload() -> dict[str, Any]:
    """A /api/app/me response with one organization."""
    return envelope(
        {
            "user_id": 42,
            "organizations": {
                "1001": {"id": 1001, "name": "Acme", "role": "owner"},
            },
        }
    )


@pytest.fixture
def timezones_payload() -> dict[str, Any]:
    """A /api/app/timezones response with three timezones."""
    return envelope([[1, "US/Pacific"], [5, "UTC"], [9, "Europe/Paris"]])


@pytest.fixture
def project_payload() -> dict[str, Any]:
    """A project metadata response for an EU project."""
    return envelope(
        {
            "id": 123456,
            "name": "Analytics",
            "domain": "eu.mixpanel.com",
            "timezone_name": "UTC",
            "api_key": "key-abc",
            "token": "token-def",
            "secret": "secret-ghi",
            "cluster_id": 5,
        }
    )


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture
def mock_client_factory() -> Generator[Callable[..., MixpanelClient], None, None]:
    """Factory for creating clients backed by httpx.MockTransport.

    Backoff is disabled so retry tests run instantly.

    Usage:
        def test_something(mock_client_factory):
            def handler(request):
                return httpx.Response(200, json={"results": []})

            client = mock_client_factory(handler)
            client.list_timezones()
    """
    from mixpanel_admin.client import MixpanelClient

    clients: list[MixpanelClient] = []

    def factory(handler: Handler, **kwargs: Any) -> MixpanelClient:
        kwargs.setdefault("backoff_factor", 0.0)
        client = MixpanelClient(
            "test_user",
            "test_secret",
            _transport=httpx.MockTransport(handler),
            **kwargs,
        )
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
