"""Public authentication and configuration module.

This module provides public access to credential and option handling.

Re-exported classes:
    ConfigManager: Resolves credentials from arguments, environment
        variables or ~/.mixpanel-admin/config.toml.
    Credentials: Immutable service account credentials with SecretStr secret.
    ClientOptions: Host URL, timeout, retry and concurrency settings.

Example usage:
    from mixpanel_admin.auth import ConfigManager

    config = ConfigManager()
    creds = config.resolve_credentials()
"""

from mixpanel_admin._internal.config import (
    ClientOptions,
    ConfigManager,
    Credentials,
)

__all__ = [
    "ClientOptions",
    "ConfigManager",
    "Credentials",
]
