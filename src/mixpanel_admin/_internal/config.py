"""Configuration management for mixpanel_admin.

Handles service account credential resolution and client options.
Configuration is read from TOML at ~/.mixpanel-admin/config.toml by default:

    [service_account]
    username = "sa.user.1234.mp-service-account"
    secret = "..."

    [client]
    host_url = "https://mixpanel.com"
    concurrent_requests = 4
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
)

from mixpanel_admin.exceptions import ConfigError, MissingCredentialsError

DEFAULT_HOST_URL = "https://mixpanel.com"

USERNAME_ENV = "MIXPANEL_SERVICE_ACCOUNT_USERNAME"
SECRET_ENV = "MIXPANEL_SERVICE_ACCOUNT_SECRET"
CONFIG_PATH_ENV = "MIXPANEL_ADMIN_CONFIG"
HOST_URL_ENV = "MIXPANEL_HOST_URL"
CONCURRENT_REQUESTS_ENV = "MIXPANEL_CONCURRENT_REQUESTS"


class Credentials(BaseModel):
    """Immutable service account credentials.

    This is a frozen Pydantic model that ensures:
    - Both fields are non-empty
    - The secret is never exposed in repr/str output
    - The object cannot be modified after creation
    """

    model_config = ConfigDict(frozen=True)

    username: str
    """Service account username."""

    secret: SecretStr
    """Service account secret (redacted in output)."""

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username is non-empty."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v

    @field_validator("secret")
    @classmethod
    def validate_secret(cls, v: SecretStr) -> SecretStr:
        """Validate secret is non-empty."""
        if not v.get_secret_value().strip():
            raise ValueError("Field cannot be empty")
        return v

    @classmethod
    def from_values(cls, username: str | None, secret: str | None) -> Credentials:
        """Build credentials, failing fast if either value is absent.

        Args:
            username: Service account username.
            secret: Service account secret.

        Returns:
            Immutable Credentials object.

        Raises:
            MissingCredentialsError: If username or secret is None or blank.
        """
        missing = []
        if not username or not username.strip():
            missing.append("username")
        if not secret or not secret.strip():
            missing.append("secret")
        if missing:
            raise MissingCredentialsError(missing)
        return cls(
            username=username,  # type: ignore[arg-type]
            secret=SecretStr(secret),  # type: ignore[arg-type]
        )

    def __repr__(self) -> str:
        """Return string representation with redacted secret."""
        return f"Credentials(username={self.username!r}, secret=***)"

    def __str__(self) -> str:
        """Return string representation with redacted secret."""
        return self.__repr__()


class ClientOptions(BaseModel):
    """Immutable transport options for MixpanelClient."""

    model_config = ConfigDict(frozen=True)

    host_url: str = DEFAULT_HOST_URL
    """Base URL all API paths are relative to."""

    timeout: float = Field(default=10.0, gt=0)
    """Per-attempt request timeout in seconds."""

    max_retries: int = Field(default=3, ge=0)
    """Retries after the first attempt for transient failures (0 disables)."""

    concurrent_requests: int = Field(default=10, ge=0)
    """Maximum in-flight requests per client (0 disables the limit)."""

    backoff_factor: float = Field(default=1.0, ge=0)
    """Base delay in seconds for exponential backoff."""

    @field_validator("host_url")
    @classmethod
    def validate_host_url(cls, v: str) -> str:
        """Require an http(s) URL and strip any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"host_url must start with http:// or https://. Got: {v}")
        return v.rstrip("/")


class ConfigManager:
    """Resolves service account credentials and client options.

    Config file location (in priority order):
    1. Explicit config_path parameter
    2. MIXPANEL_ADMIN_CONFIG environment variable
    3. Default: ~/.mixpanel-admin/config.toml
    """

    DEFAULT_CONFIG_PATH = Path.home() / ".mixpanel-admin" / "config.toml"

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize ConfigManager.

        Args:
            config_path: Override config file location.
        """
        if config_path is not None:
            self._config_path = config_path
        elif CONFIG_PATH_ENV in os.environ:
            self._config_path = Path(os.environ[CONFIG_PATH_ENV])
        else:
            self._config_path = self.DEFAULT_CONFIG_PATH

    @property
    def config_path(self) -> Path:
        """Return the config file path."""
        return self._config_path

    def _read_config(self) -> dict[str, Any]:
        """Read and parse the config file.

        Returns:
            Parsed config dictionary, or empty dict if file doesn't exist.
        """
        if not self._config_path.exists():
            return {}

        try:
            with self._config_path.open("rb") as f:
                return dict(tomllib.load(f))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(
                f"Invalid TOML in config file: {e}",
                details={"path": str(self._config_path)},
            ) from e

    def _read_table(self, name: str) -> dict[str, Any]:
        table = self._read_config().get(name, {})
        if not isinstance(table, dict):
            raise ConfigError(
                f"[{name}] in config file must be a table",
                details={"path": str(self._config_path)},
            )
        return table

    def _read_string(self, account: dict[str, Any], key: str) -> str | None:
        value = account.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigError(
                f"[service_account] {key} in config file must be a string",
                details={"path": str(self._config_path), "key": key},
            )
        return value

    def resolve_credentials(
        self,
        username: str | None = None,
        secret: str | None = None,
    ) -> Credentials:
        """Resolve credentials using priority order.

        Each value is resolved independently:
        1. Explicit argument
        2. Environment variable (MIXPANEL_SERVICE_ACCOUNT_USERNAME / _SECRET)
        3. [service_account] table of the config file

        Args:
            username: Explicit service account username.
            secret: Explicit service account secret.

        Returns:
            Immutable Credentials object.

        Raises:
            MissingCredentialsError: If either value cannot be resolved.
            ConfigError: If the config file is malformed.
        """
        if not username:
            username = os.environ.get(USERNAME_ENV)
        if not secret:
            secret = os.environ.get(SECRET_ENV)

        if not username or not secret:
            account = self._read_table("service_account")
            username = username or self._read_string(account, "username")
            secret = secret or self._read_string(account, "secret")

        return Credentials.from_values(username, secret)

    def resolve_options(self, **overrides: Any) -> ClientOptions:
        """Resolve client options.

        Priority: explicit overrides (None values ignored), then
        MIXPANEL_HOST_URL / MIXPANEL_CONCURRENT_REQUESTS, then the
        [client] table of the config file, then defaults.

        Args:
            **overrides: ClientOptions field values.

        Returns:
            Validated ClientOptions.

        Raises:
            ConfigError: If any option is invalid.
        """
        values: dict[str, Any] = dict(self._read_table("client"))

        if HOST_URL_ENV in os.environ:
            values["host_url"] = os.environ[HOST_URL_ENV]
        if CONCURRENT_REQUESTS_ENV in os.environ:
            values["concurrent_requests"] = os.environ[CONCURRENT_REQUESTS_ENV]

        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return ClientOptions(**values)
        except ValidationError as e:
            raise ConfigError(
                f"Invalid client options: {e}",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e
