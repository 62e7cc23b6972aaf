"""MixpanelClient facade for Mixpanel account administration.

The MixpanelClient class is the public entry point. It owns one API client
(HTTP session plus concurrency gate) and exposes the read and write
operations on organizations, projects and timezones.

Example:
    Explicit credentials:

    ```python
    with MixpanelClient("sa-user", "sa-secret", concurrent_requests=4) as client:
        project = client.create_project(
            Project(name="Analytics", domain="EU", timezone="UTC")
        )
        print(project.id)
    ```

    Credentials from environment variables or the config file:

    ```python
    client = MixpanelClient.from_config()
    print(client.list_timezones())
    client.close()
    ```

Every operation accepts an optional ``cancel`` event. Setting it from
another thread aborts the call while it waits for a concurrency slot or
between retries, raising RequestCancelledError.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

from mixpanel_admin._internal.api_client import MixpanelAPIClient
from mixpanel_admin._internal.config import (
    DEFAULT_HOST_URL,
    ClientOptions,
    ConfigManager,
    Credentials,
)
from mixpanel_admin._internal.services.organizations import OrganizationService
from mixpanel_admin._internal.services.project_resource import ProjectResource
from mixpanel_admin._internal.services.projects import ProjectService
from mixpanel_admin._internal.services.timezones import TimezoneService

if TYPE_CHECKING:
    from types import TracebackType

    import httpx

    from mixpanel_admin.types import Organization, Project, Timezone


class MixpanelClient:
    """Client for Mixpanel organizations, projects and timezones.

    A single instance may be shared by many threads; the number of
    simultaneous requests is bounded by ``concurrent_requests``.
    """

    def __init__(
        self,
        username: str | None,
        secret: str | None,
        *,
        concurrent_requests: int = 10,
        host_url: str = DEFAULT_HOST_URL,
        timeout: float = 10.0,
        max_retries: int = 3,
        backoff_factor: float = 1.0,
        # Dependency injection for testing
        _options: ClientOptions | None = None,
        _transport: httpx.BaseTransport | None = None,
        _api_client: MixpanelAPIClient | None = None,
    ) -> None:
        """Create a client from service account credentials.

        Args:
            username: Service account username.
            secret: Service account secret.
            concurrent_requests: Maximum in-flight requests (0 disables the
                limit).
            host_url: Base URL for all requests.
            timeout: Per-attempt timeout in seconds.
            max_retries: Retries for network errors, 429 and 5xx (0 disables).
            backoff_factor: Base delay in seconds for exponential backoff.
            _options: Pre-validated options; overrides the keyword values.
            _transport: Injected httpx transport for testing.
            _api_client: Injected MixpanelAPIClient for testing.

        Raises:
            MissingCredentialsError: If username or secret is missing.
        """
        self._credentials = Credentials.from_values(username, secret)
        self._options = _options or ClientOptions(
            host_url=host_url,
            timeout=timeout,
            max_retries=max_retries,
            concurrent_requests=concurrent_requests,
            backoff_factor=backoff_factor,
        )
        self._api_client = _api_client or MixpanelAPIClient(
            self._credentials, self._options, _transport=_transport
        )
        self._organizations = OrganizationService(self._api_client)
        self._timezones = TimezoneService(self._api_client)
        self._projects = ProjectService(
            self._api_client, self._organizations, self._timezones
        )

    @classmethod
    def from_config(
        cls,
        username: str | None = None,
        secret: str | None = None,
        *,
        _config_manager: ConfigManager | None = None,
        _transport: httpx.BaseTransport | None = None,
        **options: Any,
    ) -> MixpanelClient:
        """Create a client from arguments, environment and config file.

        Args:
            username: Explicit username (overrides environment and file).
            secret: Explicit secret (overrides environment and file).
            _config_manager: Injected ConfigManager for testing.
            _transport: Injected httpx transport for testing.
            **options: ClientOptions overrides; None values are ignored.

        Returns:
            Configured MixpanelClient.

        Raises:
            MissingCredentialsError: If credentials cannot be resolved.
            ConfigError: If the config file or options are invalid.
        """
        config = _config_manager or ConfigManager()
        credentials = config.resolve_credentials(username, secret)
        resolved = config.resolve_options(**options)
        return cls(
            credentials.username,
            credentials.secret.get_secret_value(),
            _options=resolved,
            _transport=_transport,
        )

    @property
    def api(self) -> MixpanelAPIClient:
        """Underlying API client."""
        return self._api_client

    @property
    def options(self) -> ClientOptions:
        """Resolved transport options."""
        return self._options

    def projects_resource(self) -> ProjectResource:
        """Lifecycle adapter for provisioning hosts."""
        return ProjectResource(self)

    def close(self) -> None:
        """Close the HTTP session."""
        self._api_client.close()

    def __enter__(self) -> MixpanelClient:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit context manager, closing the HTTP session."""
        self.close()

    # =========================================================================
    # Organizations
    # =========================================================================

    def get_organizations(
        self, *, cancel: threading.Event | None = None
    ) -> list[Organization]:
        """List organizations visible to the service account.

        Order is unspecified.
        """
        return self._organizations.get_organizations(cancel=cancel)

    # =========================================================================
    # Projects
    # =========================================================================

    def get_project(
        self, project_id: int, *, cancel: threading.Event | None = None
    ) -> Project:
        """Fetch a project, including its api_key, token and secret."""
        return self._projects.get_project(project_id, cancel=cancel)

    def create_project(
        self, project: Project, *, cancel: threading.Event | None = None
    ) -> Project:
        """Create a project in the account's (single) organization.

        Three dependent requests run in order: timezone lookup,
        organization lookup, create. A failure after the create request
        was accepted can leave a project in Mixpanel that the caller has
        no id for; retrying would create a second one.

        Returns:
            The project with its assigned id.

        Raises:
            TimezoneNotFoundError: Unknown timezone name.
            NoOrganizationError: The account has no organization.
        """
        return self._projects.create_project(project, cancel=cancel)

    def update_project_name(
        self, project_id: int, name: str, *, cancel: threading.Event | None = None
    ) -> None:
        """Rename a project."""
        self._projects.update_project_name(project_id, name, cancel=cancel)

    def update_project_timezone(
        self, project_id: int, timezone: str, *, cancel: threading.Event | None = None
    ) -> None:
        """Change a project's timezone."""
        self._projects.update_project_timezone(project_id, timezone, cancel=cancel)

    # =========================================================================
    # Timezones
    # =========================================================================

    def list_timezones(
        self, *, cancel: threading.Event | None = None
    ) -> list[Timezone]:
        """Fetch Mixpanel's timezone list (never cached)."""
        return self._timezones.list_timezones(cancel=cancel)

    def resolve_timezone_id(
        self, name: str, *, cancel: threading.Event | None = None
    ) -> int:
        """Resolve an exact timezone name to its id.

        Raises:
            TimezoneNotFoundError: If the name is not listed.
        """
        return self._timezones.resolve_timezone_id(name, cancel=cancel)

    def timezone_is_supported(
        self, name: str, *, cancel: threading.Event | None = None
    ) -> bool:
        """Return True if Mixpanel lists the timezone name."""
        return self._timezones.timezone_is_supported(name, cancel=cancel)
