"""Organization lookup service."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from mixpanel_admin._internal.decoders import decode_organizations
from mixpanel_admin.exceptions import NoOrganizationError
from mixpanel_admin.types import Organization

if TYPE_CHECKING:
    from mixpanel_admin._internal.api_client import MixpanelAPIClient

_logger = logging.getLogger(__name__)


class OrganizationService:
    """Reads the organizations a service account belongs to.

    Only one organization is supported per account. ``get_organizations``
    returns every organization; ``first_organization`` is the single
    organization callers act on.
    """

    def __init__(self, api_client: MixpanelAPIClient) -> None:
        """Initialize the service.

        Args:
            api_client: Authenticated API client.
        """
        self._api_client = api_client

    def get_organizations(
        self, *, cancel: threading.Event | None = None
    ) -> list[Organization]:
        """List the organizations visible to the service account.

        Order is unspecified.

        Returns:
            All organizations, possibly empty.
        """
        organizations = decode_organizations(self._api_client.get_me(cancel=cancel))
        _logger.debug("Found %d organization(s)", len(organizations))
        return organizations

    def first_organization(
        self, *, cancel: threading.Event | None = None
    ) -> Organization:
        """Return the organization to act on.

        Returns:
            The first organization returned by Mixpanel.

        Raises:
            NoOrganizationError: If the account has no organization.
        """
        organizations = self.get_organizations(cancel=cancel)
        if not organizations:
            raise NoOrganizationError()
        if len(organizations) > 1:
            _logger.warning(
                "Service account belongs to %d organizations; using %s (%d)",
                len(organizations),
                organizations[0].name,
                organizations[0].id,
            )
        return organizations[0]
