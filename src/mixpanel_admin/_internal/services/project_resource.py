"""Project lifecycle adapter for infrastructure-as-code hosts.

Maps the read/create/update/delete/import callbacks a provisioning host
drives onto MixpanelClient operations. Delete and domain changes are
refused with UnsupportedOperationError: service accounts cannot delete
projects, and a project's data residency is fixed at creation.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from mixpanel_admin.exceptions import (
    DecodeError,
    TimezoneNotFoundError,
    UnsupportedOperationError,
)
from mixpanel_admin.types import Project, normalize_domain

if TYPE_CHECKING:
    from mixpanel_admin.client import MixpanelClient

_logger = logging.getLogger(__name__)


class ProjectResource:
    """Lifecycle callbacks for a managed Mixpanel project."""

    def __init__(self, client: MixpanelClient) -> None:
        """Initialize the adapter.

        Args:
            client: Client used for all API calls.
        """
        self._client = client

    def validate_timezone(
        self, timezone: str, *, cancel: threading.Event | None = None
    ) -> None:
        """Fail before any write if a timezone is unknown.

        Raises:
            TimezoneNotFoundError: If Mixpanel does not list the timezone.
        """
        if not self._client.timezone_is_supported(timezone, cancel=cancel):
            raise TimezoneNotFoundError(timezone)

    def read(
        self, project_id: int, *, cancel: threading.Event | None = None
    ) -> Project:
        """Refresh a project's state from Mixpanel."""
        return self._client.get_project(project_id, cancel=cancel)

    def create(
        self,
        name: str,
        domain: str,
        timezone: str,
        *,
        cancel: threading.Event | None = None,
    ) -> Project:
        """Create a project and return its fully populated state.

        The project is read back after creation so api_key, token and
        secret are filled in.
        """
        desired = Project(name=name, domain=normalize_domain(domain), timezone=timezone)
        created = self._client.create_project(desired, cancel=cancel)
        if created.id is None:
            raise DecodeError("results.id", None, "create response had no id")
        return self._client.get_project(created.id, cancel=cancel)

    def update(
        self,
        state: Project,
        *,
        name: str | None = None,
        timezone: str | None = None,
        domain: str | None = None,
        cancel: threading.Event | None = None,
    ) -> Project:
        """Apply changed fields to an existing project.

        Only fields that differ from ``state`` are sent.

        Args:
            state: Current known state; must have an id.
            name: Desired name, or None to keep.
            timezone: Desired timezone, or None to keep.
            domain: Desired domain, or None to keep. Any change is refused.

        Returns:
            The project as read back from Mixpanel.

        Raises:
            UnsupportedOperationError: If the domain would change.
            ValueError: If state has no id.
        """
        if state.id is None:
            raise ValueError("Cannot update a project without an id")
        if domain is not None and normalize_domain(domain) != state.domain:
            raise UnsupportedOperationError(
                "Changing project domain",
                "data residency is fixed at creation; create a new project instead",
            )

        if name is not None and name != state.name:
            _logger.debug("Renaming project %d to %r", state.id, name)
            self._client.update_project_name(state.id, name, cancel=cancel)
        if timezone is not None and timezone != state.timezone:
            _logger.debug("Changing project %d timezone to %r", state.id, timezone)
            self._client.update_project_timezone(state.id, timezone, cancel=cancel)

        return self._client.get_project(state.id, cancel=cancel)

    @staticmethod
    def delete(project_id: int) -> None:
        """Refuse to delete a project.

        Raises:
            UnsupportedOperationError: Always. No request is sent.
        """
        raise UnsupportedOperationError(
            f"Deleting project {project_id}",
            "service accounts do not have permission to delete projects; "
            "delete it from the Mixpanel UI",
        )

    @staticmethod
    def import_state(raw_id: str) -> int:
        """Parse an imported project identifier.

        Raises:
            ValueError: If the id is not an integer.
        """
        try:
            return int(raw_id.strip())
        except ValueError:
            raise ValueError(
                f"Project ID must be an integer. Got: {raw_id!r}"
            ) from None
