"""Unit tests for the MixpanelClient facade."""

from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from mixpanel_admin import MixpanelClient, __version__
from mixpanel_admin._internal.config import ConfigManager
from mixpanel_admin.exceptions import MissingCredentialsError, RequestCancelledError


class TestConstruction:
    """Tests for MixpanelClient construction."""

    def test_version(self) -> None:
        """The package exposes a version string."""
        assert __version__ == "0.1.0"

    def test_missing_credentials_at_construction(self) -> None:
        """Missing credentials fail at construction, not per call."""
        with pytest.raises(MissingCredentialsError) as exc_info:
            MixpanelClient("", "secret")
        assert exc_info.value.missing == ["username"]

    def test_options_applied(self) -> None:
        """Keyword options reach the transport."""
        client = MixpanelClient(
            "u",
            "s",
            concurrent_requests=4,
            host_url="https://eu.mixpanel.com/",
            timeout=3.0,
            max_retries=1,
        )
        assert client.options.host_url == "https://eu.mixpanel.com"
        assert client.options.timeout == 3.0
        assert client.api.limiter is not None
        assert client.api.limiter.max_concurrent == 4
        client.close()

    def test_context_manager_closes(
        self, mock_client_factory: Callable[..., MixpanelClient]
    ) -> None:
        """Leaving the context closes the HTTP session."""
        client = mock_client_factory(
            lambda _r: httpx.Response(200, json={"results": []})
        )
        with client:
            client.list_timezones()
            assert client.api._client is not None
        assert client.api._client is None


class TestFromConfig:
    """Tests for MixpanelClient.from_config()."""

    def test_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, config_path: Path
    ) -> None:
        """Credentials and options resolve from the environment."""
        monkeypatch.setenv("MIXPANEL_SERVICE_ACCOUNT_USERNAME", "env_user")
        monkeypatch.setenv("MIXPANEL_SERVICE_ACCOUNT_SECRET", "env_secret")
        monkeypatch.setenv("MIXPANEL_CONCURRENT_REQUESTS", "2")

        client = MixpanelClient.from_config(_config_manager=ConfigManager(config_path))

        assert client._credentials.username == "env_user"
        assert client.options.concurrent_requests == 2
        client.close()

    def test_from_file_with_overrides(self, config_path: Path) -> None:
        """File values are used and keyword overrides win."""
        config_path.write_text(
            '[service_account]\nusername = "file_user"\nsecret = "file_secret"\n'
            '[client]\nhost_url = "https://eu.mixpanel.com"\nmax_retries = 0\n'
        )
        client = MixpanelClient.from_config(
            _config_manager=ConfigManager(config_path), max_retries=2, timeout=None
        )
        assert client.options.host_url == "https://eu.mixpanel.com"
        assert client.options.max_retries == 2
        client.close()

    def test_missing_everywhere(self, config_path: Path) -> None:
        """Unresolvable credentials raise MissingCredentialsError."""
        with pytest.raises(MissingCredentialsError):
            MixpanelClient.from_config(_config_manager=ConfigManager(config_path))

    def test_transport_injected(self, config_path: Path) -> None:
        """The injected transport is used for requests."""
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.host)
            return httpx.Response(200, json={"results": [[5, "UTC"]]})

        client = MixpanelClient.from_config(
            "u",
            "s",
            _config_manager=ConfigManager(config_path),
            _transport=httpx.MockTransport(handler),
        )
        assert client.resolve_timezone_id("UTC") == 5
        assert seen == ["mixpanel.com"]
        client.close()


class TestCancellation:
    """Every operation honours the cancel event."""

    @pytest.mark.parametrize(
        ("operation", "args"),
        [
            ("get_organizations", ()),
            ("get_project", (1,)),
            ("list_timezones", ()),
            ("resolve_timezone_id", ("UTC",)),
            ("timezone_is_supported", ("UTC",)),
            ("update_project_name", (1, "N")),
            ("update_project_timezone", (1, "UTC")),
        ],
    )
    def test_pre_cancelled(
        self,
        mock_client_factory: Callable[..., MixpanelClient],
        operation: str,
        args: tuple[Any, ...],
    ) -> None:
        """A set cancel event aborts before any request is sent."""
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200)

        client = mock_client_factory(handler)
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(RequestCancelledError):
            getattr(client, operation)(*args, cancel=cancel)
        assert calls == []
