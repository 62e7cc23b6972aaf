"""CLI utility functions and error handling.

This module provides shared utilities for the CLI:
- ExitCode enum for standardized exit codes
- handle_errors decorator for exception-to-exit-code mapping
- Console instances for stdout/stderr separation
- Lazy client initialization from global options
- status_spinner context manager for network calls
"""

from __future__ import annotations

import functools
import logging
import os
import sys
from collections.abc import Callable, Generator
from contextlib import contextmanager
from enum import IntEnum
from typing import TYPE_CHECKING, Any, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from mixpanel_admin.exceptions import (
    AuthenticationError,
    ConfigError,
    DecodeError,
    HTTPStatusError,
    MissingCredentialsError,
    MixpanelAdminError,
    NoOrganizationError,
    RateLimitError,
    TimezoneNotFoundError,
    TransportError,
    UnsupportedOperationError,
)

if TYPE_CHECKING:
    from mixpanel_admin.client import MixpanelClient

# Data output goes to stdout; progress/errors go to stderr
console = Console()
err_console = Console(stderr=True, no_color=bool(os.environ.get("NO_COLOR")))


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands.

    Exit codes follow Unix conventions:
    - 0: Success
    - 1-5: Application-specific errors
    - 130: Interrupted by SIGINT (Ctrl+C)
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 2
    INVALID_ARGS = 3
    NOT_FOUND = 4
    RATE_LIMIT = 5
    INTERRUPTED = 130


F = TypeVar("F", bound=Callable[..., Any])


def handle_errors(func: F) -> F:
    """Decorator to convert library exceptions to CLI exit codes.

    Maps MixpanelAdminError subclasses to exit codes and prints formatted
    error messages to stderr.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except MissingCredentialsError as e:
            err_console.print(f"[red]Missing credentials:[/red] {escape(e.message)}")
            raise typer.Exit(ExitCode.AUTH_ERROR) from None
        except AuthenticationError as e:
            err_console.print(f"[red]Authentication error:[/red] {escape(e.message)}")
            raise typer.Exit(ExitCode.AUTH_ERROR) from None
        except RateLimitError as e:
            err_console.print(f"[yellow]Rate limited:[/yellow] {escape(e.message)}")
            if e.retry_after:
                err_console.print(
                    f"[cyan]Wait {e.retry_after} seconds before retrying.[/cyan]"
                )
            raise typer.Exit(ExitCode.RATE_LIMIT) from None
        except HTTPStatusError as e:
            body = escape(e.body[:500])
            err_console.print(f"[red]HTTP {e.status_code}:[/red] {body}")
            if e.request_url:
                request_line = escape(f"{e.request_method} {e.request_url}")
                err_console.print(f"[dim]{request_line}[/dim]")
            if e.status_code == 403:
                err_console.print(
                    "[yellow]Hint:[/yellow] Check service account permissions."
                )
            if e.status_code == 404:
                raise typer.Exit(ExitCode.NOT_FOUND) from None
            raise typer.Exit(ExitCode.GENERAL_ERROR) from None
        except TimezoneNotFoundError as e:
            err_console.print(f"[red]Timezone not found:[/red] '{escape(e.name)}'")
            err_console.print("Run 'mpadmin timezones list' for valid names.")
            raise typer.Exit(ExitCode.NOT_FOUND) from None
        except NoOrganizationError as e:
            err_console.print(f"[red]Error:[/red] {escape(e.message)}")
            raise typer.Exit(ExitCode.NOT_FOUND) from None
        except UnsupportedOperationError as e:
            err_console.print(f"[red]Not supported:[/red] {escape(e.message)}")
            raise typer.Exit(ExitCode.GENERAL_ERROR) from None
        except TransportError as e:
            err_console.print(f"[red]Network error:[/red] {escape(e.message)}")
            raise typer.Exit(ExitCode.GENERAL_ERROR) from None
        except DecodeError as e:
            err_console.print(f"[red]Unexpected response:[/red] {escape(e.message)}")
            raise typer.Exit(ExitCode.GENERAL_ERROR) from None
        except ConfigError as e:
            err_console.print(f"[red]Configuration error:[/red] {escape(e.message)}")
            raise typer.Exit(ExitCode.GENERAL_ERROR) from None
        except MixpanelAdminError as e:
            err_console.print(f"[red]Error:[/red] {escape(e.message)}")
            raise typer.Exit(ExitCode.GENERAL_ERROR) from None
        except ValueError as e:
            err_console.print(f"[red]Invalid argument:[/red] {escape(str(e))}")
            raise typer.Exit(ExitCode.INVALID_ARGS) from None

    return wrapper  # type: ignore[return-value]


def configure_logging(verbose: bool) -> None:
    """Send library log records to stderr through Rich.

    Args:
        verbose: If True log at DEBUG, otherwise WARNING.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def get_client(ctx: typer.Context) -> MixpanelClient:
    """Get or create the client from context.

    Lazily builds a MixpanelClient from the global options, environment
    variables and config file. The client is cached in the context.

    Args:
        ctx: Typer context with global options in obj dict.

    Returns:
        Configured MixpanelClient.

    Raises:
        MissingCredentialsError: If credentials cannot be resolved.
        ConfigError: If options are invalid.
    """
    from mixpanel_admin.client import MixpanelClient

    if ctx.obj.get("client") is None:
        client = MixpanelClient.from_config(
            ctx.obj.get("username"),
            ctx.obj.get("secret"),
            host_url=ctx.obj.get("host_url"),
            concurrent_requests=ctx.obj.get("concurrency"),
        )
        ctx.obj["client"] = client
        ctx.call_on_close(client.close)
    result: MixpanelClient = ctx.obj["client"]
    return result


def output_result(
    ctx: typer.Context,
    data: dict[str, Any] | list[dict[str, Any]],
    *,
    format: str | None = None,
) -> None:
    """Output data in the requested format.

    JSON and plain text are written verbatim, without markup, emoji or
    wrapping, so brackets in server data survive.

    Args:
        ctx: Typer context with global options in obj dict.
        data: A record (dict) or a list of id/name rows.
        format: Output format. If None, falls back to ctx.obj["format"] or "json".
    """
    from mixpanel_admin.cli.formatters import format_json, format_plain, format_table

    fmt = format if format is not None else ctx.obj.get("format", "json")

    if fmt == "table":
        console.print(format_table(data))
    elif fmt == "plain":
        console.out(format_plain(data), highlight=False)
    else:
        console.out(format_json(data), highlight=False)


@contextmanager
def status_spinner(ctx: typer.Context, message: str) -> Generator[None, None, None]:
    """Show a spinner on stderr while the wrapped operation runs.

    Skipped in quiet mode and when stderr is not a TTY.

    Args:
        ctx: Typer context with global options in obj dict.
        message: Status message to display (e.g., "Creating project...").
    """
    quiet = ctx.obj.get("quiet", False) if ctx.obj else False

    if quiet or not sys.stderr.isatty():
        yield
    else:
        with err_console.status(message):
            yield
