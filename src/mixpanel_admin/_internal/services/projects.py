"""Project service: read, create and update Mixpanel projects.

Project creation is a fixed sequence of dependent calls with no
server-side transaction:

1. Map the project's domain to a cluster id (local lookup).
2. Resolve the timezone name to a timezone id (GET timezones).
3. Resolve the organization (GET me, first organization).
4. POST create-project.
5. Decode the assigned project id.

Any failure aborts the sequence and is raised unchanged. Nothing is rolled
back: if step 5 fails after step 4 succeeded, the project exists in
Mixpanel but the caller never learns its id. That case is logged at
warning level and the DecodeError is re-raised.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import TYPE_CHECKING

from mixpanel_admin._internal.decoders import decode_project, decode_project_id
from mixpanel_admin.exceptions import DecodeError
from mixpanel_admin.types import CLUSTER_IDS, Project, normalize_domain

if TYPE_CHECKING:
    from mixpanel_admin._internal.api_client import MixpanelAPIClient
    from mixpanel_admin._internal.services.organizations import OrganizationService
    from mixpanel_admin._internal.services.timezones import TimezoneService

_logger = logging.getLogger(__name__)


def cluster_id_for(domain: str) -> int:
    """Look up the cluster id for a data residency domain.

    Args:
        domain: "US" or "EU" (case-insensitive).

    Returns:
        Mixpanel cluster id.

    Raises:
        ValueError: If the domain has no known cluster.
    """
    return CLUSTER_IDS[normalize_domain(domain)]


class ProjectService:
    """Reads and writes Mixpanel projects."""

    def __init__(
        self,
        api_client: MixpanelAPIClient,
        organizations: OrganizationService,
        timezones: TimezoneService,
    ) -> None:
        """Initialize the service.

        Args:
            api_client: Authenticated API client.
            organizations: Service used to pick the target organization.
            timezones: Service used to resolve timezone ids.
        """
        self._api_client = api_client
        self._organizations = organizations
        self._timezones = timezones

    def get_project(
        self, project_id: int, *, cancel: threading.Event | None = None
    ) -> Project:
        """Fetch a project's metadata, including its secrets.

        Args:
            project_id: Project identifier.

        Returns:
            Fully populated Project.
        """
        content = self._api_client.get_project_metadata(project_id, cancel=cancel)
        return decode_project(content)

    def create_project(
        self, project: Project, *, cancel: threading.Event | None = None
    ) -> Project:
        """Create a project in the account's organization.

        Args:
            project: Desired name, domain and timezone. ``id`` is ignored.

        Returns:
            The given project with ``id`` set to the assigned identifier.
            Secrets are not populated; use get_project for those.

        Raises:
            ValueError: If the domain has no known cluster.
            TimezoneNotFoundError: If the timezone name is unknown.
            NoOrganizationError: If the account has no organization.
            DecodeError: If the create response cannot be decoded. The
                project may nevertheless exist in Mixpanel.
        """
        cluster_id = cluster_id_for(project.domain)
        timezone_id = self._timezones.resolve_timezone_id(
            project.timezone, cancel=cancel
        )
        organization = self._organizations.first_organization(cancel=cancel)

        payload = {
            "project_name": project.name,
            "cluster_id": cluster_id,
            "timezone_id": timezone_id,
        }
        _logger.debug(
            "Creating project in organization %d: %s", organization.id, payload
        )
        content = self._api_client.create_project(
            organization.id, payload, cancel=cancel
        )

        try:
            project_id = decode_project_id(content)
        except DecodeError:
            _logger.warning(
                "Project %r may have been created in organization %d, "
                "but its id could not be read from the response",
                project.name,
                organization.id,
            )
            raise

        _logger.info("Project created with ID: %d", project_id)
        return dataclasses.replace(
            project, id=project_id, domain=normalize_domain(project.domain)
        )

    def update_project_name(
        self, project_id: int, name: str, *, cancel: threading.Event | None = None
    ) -> None:
        """Rename a project.

        Args:
            project_id: Project identifier.
            name: New project name.
        """
        self._api_client.update_project(project_id, {"name": name}, cancel=cancel)

    def update_project_timezone(
        self, project_id: int, timezone: str, *, cancel: threading.Event | None = None
    ) -> None:
        """Change a project's timezone.

        Mixpanel expects the same value in both timezone and timezone_name.

        Args:
            project_id: Project identifier.
            timezone: Timezone name.
        """
        self._api_client.update_project(
            project_id,
            {"timezone": timezone, "timezone_name": timezone},
            cancel=cancel,
        )
