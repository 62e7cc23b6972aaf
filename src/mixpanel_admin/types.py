"""Value types for mixpanel_admin operations.

All types are immutable frozen dataclasses with JSON serialization via
``to_dict()``. Secret project fields are excluded from ``repr`` and are
redacted by ``to_dict()`` unless explicitly requested.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

Domain = Literal["US", "EU"]
"""Data residency domain of a project.

Mixpanel reports the domain as a cluster hostname; only
``eu.mixpanel.com`` maps to EU, everything else is US.
"""

EU_DOMAIN_HOST = "eu.mixpanel.com"

# Hard-coded in the Mixpanel web app; no API exposes them.
CLUSTER_IDS: dict[str, int] = {
    "US": 1,
    "EU": 5,
}

REDACTED = "********"


def domain_from_host(host: str) -> Domain:
    """Map a raw cluster hostname to a Domain.

    Args:
        host: Hostname reported by the project metadata endpoint.

    Returns:
        "EU" for eu.mixpanel.com, "US" for anything else.
    """
    if host == EU_DOMAIN_HOST:
        return "EU"
    return "US"


def normalize_domain(value: str) -> Domain:
    """Validate and upper-case a user supplied domain.

    Args:
        value: Domain name, case-insensitive ("us", "EU", ...).

    Returns:
        The normalized Domain.

    Raises:
        ValueError: If the domain has no known cluster.
    """
    upper = value.strip().upper()
    if upper not in CLUSTER_IDS:
        valid = ", ".join(CLUSTER_IDS)
        raise ValueError(f"Domain must be one of: {valid}. Got: {value}")
    return upper  # type: ignore[return-value]


@dataclass(frozen=True)
class Organization:
    """A Mixpanel organization the service account belongs to."""

    id: int
    """Organization identifier."""

    name: str
    """Organization display name."""

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class Timezone:
    """An entry from Mixpanel's timezone reference list."""

    id: int
    """Numeric timezone identifier used when creating projects."""

    name: str
    """IANA-style timezone name (e.g. "US/Pacific")."""

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class Project:
    """A Mixpanel project.

    A project built by a caller for ``create_project`` has no ``id`` and
    empty secrets; projects read back from Mixpanel have all fields set.

    Attributes:
        name: Project display name.
        domain: Data residency domain (US or EU).
        timezone: Timezone name (e.g. "UTC").
        id: Project identifier, None until created.
        api_key: Project API key (secret).
        token: Project token (secret).
        secret: Project API secret (secret).
    """

    name: str
    """Project display name."""

    domain: Domain
    """Data residency domain."""

    timezone: str
    """Timezone name."""

    id: int | None = None
    """Project identifier, None until Mixpanel assigns one."""

    api_key: str = field(default="", repr=False)
    """Project API key."""

    token: str = field(default="", repr=False)
    """Project token."""

    secret: str = field(default="", repr=False)
    """Project API secret."""

    def to_dict(self, *, include_secrets: bool = False) -> dict[str, Any]:
        """Serialize for JSON output.

        Args:
            include_secrets: If True, include api_key, token and secret in
                clear text. Otherwise non-empty secrets are redacted.

        Returns:
            Dictionary with all project fields.
        """

        def _secret(value: str) -> str:
            if include_secrets or not value:
                return value
            return REDACTED

        return {
            "id": self.id,
            "name": self.name,
            "domain": self.domain,
            "timezone": self.timezone,
            "api_key": _secret(self.api_key),
            "token": _secret(self.token),
            "secret": _secret(self.secret),
        }
