"""Organization commands.

- list: List organizations visible to the service account
"""

from __future__ import annotations

import typer

from mixpanel_admin.cli.options import FormatOption
from mixpanel_admin.cli.utils import (
    get_client,
    handle_errors,
    output_result,
    status_spinner,
)

orgs_app = typer.Typer(
    name="orgs",
    help="Inspect organizations.",
    no_args_is_help=True,
    rich_markup_mode="markdown",
)


@orgs_app.command("list")
@handle_errors
def list_organizations(ctx: typer.Context, format: FormatOption = "json") -> None:
    """List organizations the service account belongs to.

    Only the first organization is used when creating projects.

    Examples:

        mpadmin orgs list
        mpadmin orgs list --format table
    """
    client = get_client(ctx)
    with status_spinner(ctx, "Fetching organizations..."):
        organizations = client.get_organizations()
    output_result(
        ctx,
        [org.to_dict() for org in organizations],
        format=format,
    )
