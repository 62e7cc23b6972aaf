"""
mixpanel_admin - Python client for administering Mixpanel accounts.

Manage projects, organizations and timezones with a Mixpanel service
account. Requests are authenticated, throttled and retried for you.
"""

from mixpanel_admin.client import MixpanelClient
from mixpanel_admin.exceptions import (
    AuthenticationError,
    ConfigError,
    DecodeError,
    HTTPStatusError,
    MissingCredentialsError,
    MixpanelAdminError,
    NoOrganizationError,
    RateLimitError,
    RequestCancelledError,
    ServerError,
    TimezoneNotFoundError,
    TransportError,
    UnsupportedOperationError,
)
from mixpanel_admin.types import (
    CLUSTER_IDS,
    Domain,
    Organization,
    Project,
    Timezone,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "MixpanelClient",
    # Exceptions
    "MixpanelAdminError",
    "ConfigError",
    "MissingCredentialsError",
    "TransportError",
    "RequestCancelledError",
    "HTTPStatusError",
    "AuthenticationError",
    "RateLimitError",
    "ServerError",
    "DecodeError",
    "NoOrganizationError",
    "TimezoneNotFoundError",
    "UnsupportedOperationError",
    # Types
    "CLUSTER_IDS",
    "Domain",
    "Organization",
    "Project",
    "Timezone",
]
