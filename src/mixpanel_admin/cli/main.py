"""CLI entry point for mixpanel_admin.

This module provides the `mpadmin` command-line interface. It defines
global options and registers command groups.

Usage:
    mpadmin [OPTIONS] COMMAND [ARGS]...

Examples:
    mpadmin orgs list
    mpadmin project get 123456 --show-secrets
    mpadmin project create --name Analytics --domain EU --timezone UTC
    mpadmin timezones check US/Pacific
"""

from __future__ import annotations

import signal
import sys
from typing import Annotated

import typer

import mixpanel_admin
from mixpanel_admin._internal.config import (
    CONCURRENT_REQUESTS_ENV,
    HOST_URL_ENV,
    SECRET_ENV,
    USERNAME_ENV,
)
from mixpanel_admin.cli.utils import ExitCode, configure_logging, err_console

app = typer.Typer(
    name="mpadmin",
    help="Mixpanel admin CLI - manage projects with a service account.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        print(f"mpadmin version {mixpanel_admin.__version__}")
        raise typer.Exit()


def _handle_interrupt(_signum: int, _frame: object) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    err_console.print("\n[yellow]Interrupted[/yellow]")
    sys.exit(ExitCode.INTERRUPTED)


signal.signal(signal.SIGINT, _handle_interrupt)


@app.callback()
def main(
    ctx: typer.Context,
    username: Annotated[
        str | None,
        typer.Option(
            "--username",
            "-u",
            help="Service account username.",
            envvar=USERNAME_ENV,
        ),
    ] = None,
    secret: Annotated[
        str | None,
        typer.Option(
            "--secret",
            help="Service account secret.",
            envvar=SECRET_ENV,
            show_envvar=True,
        ),
    ] = None,
    host_url: Annotated[
        str | None,
        typer.Option("--host", help="Mixpanel base URL.", envvar=HOST_URL_ENV),
    ] = None,
    concurrency: Annotated[
        int | None,
        typer.Option(
            "--concurrency",
            "-c",
            help="Maximum concurrent requests (0 for unlimited).",
            envvar=CONCURRENT_REQUESTS_ENV,
            min=0,
        ),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress progress output."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug output."),
    ] = False,
    _version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Mixpanel admin CLI - manage projects with a service account.

    Credentials come from --username/--secret, the
    MIXPANEL_SERVICE_ACCOUNT_USERNAME/_SECRET environment variables, or
    ~/.mixpanel-admin/config.toml.
    """
    ctx.ensure_object(dict)
    ctx.obj["username"] = username
    ctx.obj["secret"] = secret
    ctx.obj["host_url"] = host_url
    ctx.obj["concurrency"] = concurrency
    ctx.obj["quiet"] = quiet
    ctx.obj["verbose"] = verbose
    ctx.obj["client"] = None
    if verbose:
        configure_logging(verbose)


def _register_commands() -> None:
    """Register all command groups with the main app."""
    from mixpanel_admin.cli.commands.orgs import orgs_app
    from mixpanel_admin.cli.commands.projects import project_app
    from mixpanel_admin.cli.commands.timezones import timezones_app

    app.add_typer(orgs_app, name="orgs", help="Inspect organizations.")
    app.add_typer(project_app, name="project", help="Manage projects.")
    app.add_typer(timezones_app, name="timezones", help="List and check timezones.")


_register_commands()


if __name__ == "__main__":
    app()
