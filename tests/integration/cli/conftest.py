"""Shared fixtures for CLI integration tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import MagicMock, patch

import httpx
import pytest
from typer.testing import CliRunner

from mixpanel_admin.client import MixpanelClient
from mixpanel_admin.types import Organization, Project, Timezone


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def sample_project() -> Project:
    """A fully populated project as read back from Mixpanel."""
    return Project(
        id=123456,
        name="Analytics",
        domain="EU",
        timezone="UTC",
        api_key="key-abc",
        token="token-def",
        secret="secret-ghi",
    )


@pytest.fixture
def mock_client(sample_project: Project) -> MagicMock:
    """Create a mock MixpanelClient for testing commands."""
    client = MagicMock(spec=MixpanelClient)

    client.get_organizations.return_value = [Organization(id=1001, name="Acme")]
    client.list_timezones.return_value = [
        Timezone(id=1, name="US/Pacific"),
        Timezone(id=5, name="UTC"),
    ]
    client.timezone_is_supported.side_effect = lambda name, **_: name in {
        "US/Pacific",
        "UTC",
    }
    client.get_project.return_value = sample_project
    client.create_project.return_value = Project(
        id=123456, name="Analytics", domain="EU", timezone="UTC"
    )

    from mixpanel_admin._internal.services.project_resource import ProjectResource

    client.projects_resource.side_effect = lambda: ProjectResource(client)
    return client


@pytest.fixture
def patch_get_client(mock_client: MagicMock) -> Callable[[str], Any]:
    """Return a helper that patches get_client in a command module."""

    def _patch(module: str) -> Any:
        return patch(
            f"mixpanel_admin.cli.commands.{module}.get_client",
            return_value=mock_client,
        )

    return _patch


@pytest.fixture
def http_env(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[Callable[[Callable[[httpx.Request], httpx.Response]], None], None, None]:
    """Route the CLI's real client through an httpx.MockTransport.

    Credentials come from the environment, so the whole stack from option
    parsing to response decoding is exercised.
    """
    monkeypatch.setenv("MIXPANEL_SERVICE_ACCOUNT_USERNAME", "cli_user")
    monkeypatch.setenv("MIXPANEL_SERVICE_ACCOUNT_SECRET", "cli_secret")
    monkeypatch.setenv("MIXPANEL_ADMIN_CONFIG", "/nonexistent/config.toml")

    original = MixpanelClient.from_config.__func__  # type: ignore[attr-defined]

    def install(handler: Callable[[httpx.Request], httpx.Response]) -> None:
        def from_config(cls: type[MixpanelClient], *args: Any, **kwargs: Any) -> Any:
            kwargs.setdefault("backoff_factor", 0.0)
            return original(
                cls, *args, _transport=httpx.MockTransport(handler), **kwargs
            )

        monkeypatch.setattr(MixpanelClient, "from_config", classmethod(from_config))

    yield install
