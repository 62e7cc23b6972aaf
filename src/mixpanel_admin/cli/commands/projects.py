"""Project commands.

- get: Show a project's settings
- create: Create a project in the account's organization
- update: Rename a project or change its timezone
- delete: Always refused (service accounts cannot delete projects)
"""

from __future__ import annotations

from typing import Annotated

import typer

from mixpanel_admin._internal.services.project_resource import ProjectResource
from mixpanel_admin.cli.options import FormatOption
from mixpanel_admin.cli.utils import (
    ExitCode,
    err_console,
    get_client,
    handle_errors,
    output_result,
    status_spinner,
)

project_app = typer.Typer(
    name="project",
    help="Manage projects.",
    no_args_is_help=True,
    rich_markup_mode="markdown",
)

ShowSecretsOption = Annotated[
    bool,
    typer.Option(
        "--show-secrets",
        help="Print api_key, token and secret in clear text.",
    ),
]


@project_app.command("get")
@handle_errors
def get_project(
    ctx: typer.Context,
    project_id: Annotated[int, typer.Argument(help="Project ID.")],
    show_secrets: ShowSecretsOption = False,
    format: FormatOption = "json",
) -> None:
    """Show a project's name, domain, timezone and credentials.

    Credentials are redacted unless --show-secrets is given.

    Examples:

        mpadmin project get 123456
        mpadmin project get 123456 --show-secrets
    """
    client = get_client(ctx)
    with status_spinner(ctx, "Fetching project..."):
        project = client.get_project(project_id)
    output_result(ctx, project.to_dict(include_secrets=show_secrets), format=format)


@project_app.command("create")
@handle_errors
def create_project(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name", "-n", help="Project name.")],
    timezone: Annotated[
        str, typer.Option("--timezone", "-t", help="Timezone name, e.g. UTC.")
    ],
    domain: Annotated[
        str, typer.Option("--domain", "-d", help="Data residency: US or EU.")
    ] = "US",
    show_secrets: ShowSecretsOption = False,
    format: FormatOption = "json",
) -> None:
    """Create a project.

    The project is created in the first organization of the service
    account. If the command fails after Mixpanel accepted the request,
    check the Mixpanel UI before retrying to avoid a duplicate project.

    Examples:

        mpadmin project create --name Analytics --timezone UTC
        mpadmin project create -n "EU Analytics" -t Europe/Paris -d EU
    """
    client = get_client(ctx)
    resource = client.projects_resource()
    with status_spinner(ctx, "Creating project..."):
        project = resource.create(name, domain, timezone)
    output_result(ctx, project.to_dict(include_secrets=show_secrets), format=format)


@project_app.command("update")
@handle_errors
def update_project(
    ctx: typer.Context,
    project_id: Annotated[int, typer.Argument(help="Project ID.")],
    name: Annotated[
        str | None, typer.Option("--name", "-n", help="New project name.")
    ] = None,
    timezone: Annotated[
        str | None, typer.Option("--timezone", "-t", help="New timezone name.")
    ] = None,
    format: FormatOption = "json",
) -> None:
    """Rename a project and/or change its timezone.

    Only fields that differ from the current settings are sent.

    Examples:

        mpadmin project update 123456 --name "Renamed"
        mpadmin project update 123456 --timezone US/Pacific
    """
    if name is None and timezone is None:
        err_console.print(
            "[red]Error:[/red] Nothing to update; pass --name or --timezone"
        )
        raise typer.Exit(ExitCode.INVALID_ARGS)

    client = get_client(ctx)
    resource = client.projects_resource()
    with status_spinner(ctx, "Updating project..."):
        if timezone is not None:
            resource.validate_timezone(timezone)
        current = resource.read(project_id)
        project = resource.update(current, name=name, timezone=timezone)
    output_result(ctx, project.to_dict(), format=format)


@project_app.command("delete")
@handle_errors
def delete_project(
    project_id: Annotated[int, typer.Argument(help="Project ID.")],
) -> None:
    """Delete a project (not supported).

    Service accounts cannot delete projects. This command always fails
    without contacting Mixpanel; delete the project from the Mixpanel UI.
    """
    ProjectResource.delete(project_id)
