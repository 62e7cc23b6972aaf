"""Unit tests for CLI utilities."""

from __future__ import annotations

import logging
from typing import Any
from unittest.mock import MagicMock, patch

import click.exceptions
import pytest

from mixpanel_admin.cli.utils import (
    ExitCode,
    configure_logging,
    get_client,
    handle_errors,
    output_result,
)
from mixpanel_admin.exceptions import (
    AuthenticationError,
    ConfigError,
    DecodeError,
    HTTPStatusError,
    MissingCredentialsError,
    MixpanelAdminError,
    NoOrganizationError,
    RateLimitError,
    ServerError,
    TimezoneNotFoundError,
    TransportError,
    UnsupportedOperationError,
)


class TestExitCode:
    """Tests for ExitCode enum."""

    def test_values(self) -> None:
        """Exit codes follow the documented numbering."""
        assert ExitCode.SUCCESS == 0
        assert ExitCode.GENERAL_ERROR == 1
        assert ExitCode.AUTH_ERROR == 2
        assert ExitCode.INVALID_ARGS == 3
        assert ExitCode.NOT_FOUND == 4
        assert ExitCode.RATE_LIMIT == 5
        assert ExitCode.INTERRUPTED == 130


class TestHandleErrors:
    """Tests for handle_errors decorator."""

    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (MissingCredentialsError(["secret"]), ExitCode.AUTH_ERROR),
            (AuthenticationError(), ExitCode.AUTH_ERROR),
            (RateLimitError(), ExitCode.RATE_LIMIT),
            (HTTPStatusError(status_code=404), ExitCode.NOT_FOUND),
            (
                HTTPStatusError(status_code=403, body="forbidden"),
                ExitCode.GENERAL_ERROR,
            ),
            (ServerError(status_code=503), ExitCode.GENERAL_ERROR),
            (TimezoneNotFoundError("Mars/Base"), ExitCode.NOT_FOUND),
            (NoOrganizationError(), ExitCode.NOT_FOUND),
            (UnsupportedOperationError("Deleting", "no"), ExitCode.GENERAL_ERROR),
            (TransportError("down"), ExitCode.GENERAL_ERROR),
            (DecodeError("results", None), ExitCode.GENERAL_ERROR),
            (ConfigError("[client] must be a table"), ExitCode.GENERAL_ERROR),
            (MixpanelAdminError("other"), ExitCode.GENERAL_ERROR),
            (ValueError("bad domain"), ExitCode.INVALID_ARGS),
        ],
    )
    def test_exit_codes(self, exc: Exception, expected: ExitCode) -> None:
        """Each exception maps to its exit code."""

        @handle_errors
        def command() -> None:
            raise exc

        with pytest.raises(click.exceptions.Exit) as exc_info:
            command()
        assert exc_info.value.exit_code == expected

    def test_success_passes_through(self) -> None:
        """Return values are passed through unchanged."""

        @handle_errors
        def command() -> str:
            return "ok"

        assert command() == "ok"

    def test_unexpected_errors_propagate(self) -> None:
        """Exceptions outside the library are not swallowed."""

        @handle_errors
        def command() -> None:
            raise KeyError("boom")

        with pytest.raises(KeyError):
            command()

    def test_forbidden_prints_hint(self, capsys: pytest.CaptureFixture[str]) -> None:
        """403 responses print the raw body and a permissions hint."""

        @handle_errors
        def command() -> None:
            raise HTTPStatusError(status_code=403, body="[/forbidden]")

        with pytest.raises(click.exceptions.Exit):
            command()
        err = capsys.readouterr().err
        assert "[/forbidden]" in err
        assert "permissions" in err


class TestGetClient:
    """Tests for get_client."""

    def test_builds_and_caches(self, mock_context: MagicMock) -> None:
        """The client is built once and closed with the context."""
        mock_context.obj.update(username="u", secret="s", concurrency=0)
        client = MagicMock()

        with patch(
            "mixpanel_admin.client.MixpanelClient.from_config", return_value=client
        ) as from_config:
            assert get_client(mock_context) is client
            assert get_client(mock_context) is client

        from_config.assert_called_once_with(
            "u", "s", host_url=None, concurrent_requests=0
        )
        mock_context.call_on_close.assert_called_once_with(client.close)

    def test_missing_credentials_propagate(self, mock_context: MagicMock) -> None:
        """Missing credentials raise for handle_errors to map."""
        with (
            patch.dict("os.environ", {"MIXPANEL_ADMIN_CONFIG": "/nonexistent.toml"}),
            pytest.raises(MissingCredentialsError),
        ):
            get_client(mock_context)


class TestOutputResult:
    """Tests for output_result."""

    def test_json_default(
        self, mock_context: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """JSON is the default format."""
        output_result(mock_context, [{"id": 5, "name": "UTC"}])
        assert '"name": "UTC"' in capsys.readouterr().out

    @pytest.mark.parametrize(
        ("fmt", "expected"), [("plain", "UTC"), ("table", "NAME")]
    )
    def test_formats(
        self,
        mock_context: MagicMock,
        capsys: pytest.CaptureFixture[str],
        fmt: str,
        expected: Any,
    ) -> None:
        """Plain and table formats are honoured."""
        output_result(mock_context, [{"id": 5, "name": "UTC"}], format=fmt)
        assert expected in capsys.readouterr().out

    @pytest.mark.parametrize("fmt", ["json", "plain"])
    def test_brackets_written_verbatim(
        self,
        mock_context: MagicMock,
        capsys: pytest.CaptureFixture[str],
        fmt: str,
    ) -> None:
        """Markup-like text and emoji codes are not rendered."""
        output_result(mock_context, {"name": "[red]Prod :rocket:"}, format=fmt)
        assert "[red]Prod :rocket:" in capsys.readouterr().out


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture(autouse=True)
    def restore_logging(self) -> Any:
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_verbose(self) -> None:
        """Verbose mode logs at DEBUG."""
        configure_logging(True)
        assert logging.getLogger().level == logging.DEBUG

    def test_quiet(self) -> None:
        """Default mode logs warnings only."""
        configure_logging(False)
        assert logging.getLogger().level == logging.WARNING
