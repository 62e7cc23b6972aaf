"""Timezone reference data service.

The timezone list is fetched fresh on every call; nothing is cached.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from mixpanel_admin._internal.decoders import decode_timezones
from mixpanel_admin.exceptions import TimezoneNotFoundError
from mixpanel_admin.types import Timezone

if TYPE_CHECKING:
    from mixpanel_admin._internal.api_client import MixpanelAPIClient


class TimezoneService:
    """Lists timezones and resolves timezone names to ids."""

    def __init__(self, api_client: MixpanelAPIClient) -> None:
        """Initialize the service.

        Args:
            api_client: Authenticated API client.
        """
        self._api_client = api_client

    def list_timezones(
        self, *, cancel: threading.Event | None = None
    ) -> list[Timezone]:
        """Fetch Mixpanel's timezone list.

        Returns:
            Timezones in server order.
        """
        return decode_timezones(self._api_client.get_timezones(cancel=cancel))

    def _find(self, name: str, cancel: threading.Event | None) -> Timezone | None:
        for timezone in self.list_timezones(cancel=cancel):
            if timezone.name == name:
                return timezone
        return None

    def resolve_timezone_id(
        self, name: str, *, cancel: threading.Event | None = None
    ) -> int:
        """Resolve a timezone name to its numeric id.

        Matching is exact and case-sensitive.

        Args:
            name: Timezone name (e.g. "UTC").

        Returns:
            The timezone id.

        Raises:
            TimezoneNotFoundError: If no timezone has that name.
        """
        timezone = self._find(name, cancel)
        if timezone is None:
            raise TimezoneNotFoundError(name)
        return timezone.id

    def timezone_is_supported(
        self, name: str, *, cancel: threading.Event | None = None
    ) -> bool:
        """Check whether Mixpanel knows a timezone name.

        Args:
            name: Timezone name (exact, case-sensitive).

        Returns:
            True if the name is in the timezone list.
        """
        return self._find(name, cancel) is not None
