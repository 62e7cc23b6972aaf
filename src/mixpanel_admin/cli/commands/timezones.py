"""Timezone commands.

- list: List timezones Mixpanel accepts
- check: Check whether a timezone name is supported
"""

from __future__ import annotations

from typing import Annotated

import typer

from mixpanel_admin.cli.options import FormatOption
from mixpanel_admin.cli.utils import (
    ExitCode,
    get_client,
    handle_errors,
    output_result,
    status_spinner,
)

timezones_app = typer.Typer(
    name="timezones",
    help="List and check timezones.",
    no_args_is_help=True,
    rich_markup_mode="markdown",
)


@timezones_app.command("list")
@handle_errors
def list_timezones(ctx: typer.Context, format: FormatOption = "json") -> None:
    """List all timezones with their numeric ids.

    Examples:

        mpadmin timezones list
        mpadmin timezones list --format plain
    """
    client = get_client(ctx)
    with status_spinner(ctx, "Fetching timezones..."):
        timezones = client.list_timezones()
    output_result(ctx, [tz.to_dict() for tz in timezones], format=format)


@timezones_app.command("check")
@handle_errors
def check_timezone(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Timezone name (case-sensitive).")],
    format: FormatOption = "json",
) -> None:
    """Check whether Mixpanel supports a timezone name.

    Exits with code 4 when the timezone is not supported.

    Examples:

        mpadmin timezones check UTC
        mpadmin timezones check "US/Pacific"
    """
    client = get_client(ctx)
    with status_spinner(ctx, "Fetching timezones..."):
        supported = client.timezone_is_supported(name)
    output_result(ctx, {"name": name, "supported": supported}, format=format)
    if not supported:
        raise typer.Exit(ExitCode.NOT_FOUND)
