"""Exception hierarchy for mixpanel_admin.

All library exceptions inherit from MixpanelAdminError, so callers can
catch every library error with a single except clause while still handling
specific failures (missing credentials, HTTP status errors, decode errors,
unknown timezones) individually.

Every exception carries a machine-readable ``code`` and a ``details``
dictionary that is safe to serialize with ``to_dict()``.
"""

from __future__ import annotations

from typing import Any


class MixpanelAdminError(Exception):
    """Base exception for all mixpanel_admin errors.

    All library exceptions inherit from this class, allowing callers to:
    - Catch all library errors: except MixpanelAdminError
    - Handle specific errors: except TimezoneNotFoundError
    - Serialize errors: error.to_dict()
    """

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Human-readable error message.
            code: Machine-readable error code for programmatic handling.
            details: Additional structured data about the error.
        """
        super().__init__(message)
        self._message = message
        self._code = code
        self._details = details or {}

    @property
    def code(self) -> str:
        """Machine-readable error code."""
        return self._code

    @property
    def message(self) -> str:
        """Human-readable error message."""
        return self._message

    @property
    def details(self) -> dict[str, Any]:
        """Additional structured error data."""
        return self._details

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/JSON output.

        Returns:
            Dictionary with keys: code, message, details.
        """
        return {
            "code": self._code,
            "message": self._message,
            "details": self._details,
        }

    def __str__(self) -> str:
        """Return human-readable error message."""
        return self._message

    def __repr__(self) -> str:
        """Return detailed string representation."""
        return (
            f"{self.__class__.__name__}(message={self._message!r}, code={self._code!r})"
        )


# Configuration Exceptions


class ConfigError(MixpanelAdminError):
    """Base for configuration-related errors.

    Raised when there's a problem with the config file, environment
    variables, or client options.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ConfigError.

        Args:
            message: Human-readable error message.
            details: Additional structured data.
        """
        super().__init__(message, code="CONFIG_ERROR", details=details)


class MissingCredentialsError(ConfigError):
    """Service account username or secret was not supplied.

    Raised at client construction time, never per call. The ``missing``
    property names the absent fields.
    """

    def __init__(self, missing: list[str]) -> None:
        """Initialize MissingCredentialsError.

        Args:
            missing: Names of the missing credential fields.
        """
        fields = ", ".join(missing)
        message = (
            f"Missing service account credentials: {fields}. "
            "Set MIXPANEL_SERVICE_ACCOUNT_USERNAME and "
            "MIXPANEL_SERVICE_ACCOUNT_SECRET, or pass them explicitly."
        )
        super().__init__(message, details={"missing": list(missing)})
        self._code = "MISSING_CREDENTIALS"

    @property
    def missing(self) -> list[str]:
        """Names of the missing credential fields."""
        missing = self._details.get("missing")
        return missing if isinstance(missing, list) else []


# Transport Exceptions


class TransportError(MixpanelAdminError):
    """Network-level failure (connection refused, DNS, timeout).

    Raised after the retry policy is exhausted, or immediately when
    retries are disabled.
    """

    def __init__(
        self,
        message: str,
        *,
        request_method: str | None = None,
        request_url: str | None = None,
        attempts: int = 1,
    ) -> None:
        """Initialize TransportError.

        Args:
            message: Human-readable error message.
            request_method: HTTP method used.
            request_url: Full request URL.
            attempts: Number of attempts made before giving up.
        """
        details: dict[str, Any] = {"attempts": attempts}
        if request_method is not None:
            details["request_method"] = request_method
        if request_url is not None:
            details["request_url"] = request_url
        super().__init__(message, code="TRANSPORT_ERROR", details=details)

    @property
    def attempts(self) -> int:
        """Number of attempts made before giving up."""
        return int(self._details.get("attempts", 1))


class RequestCancelledError(MixpanelAdminError):
    """The caller cancelled a request before it completed.

    Raised while waiting for a concurrency slot or between retry attempts.
    No slot is held when this is raised.
    """

    def __init__(self, message: str = "Request cancelled") -> None:
        """Initialize RequestCancelledError.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message, code="REQUEST_CANCELLED")


# HTTP Status Exceptions


class HTTPStatusError(MixpanelAdminError):
    """Mixpanel returned a status outside the 200-299 range.

    The raw response body is kept unparsed for diagnostics.

    Example:
        ```python
        try:
            client.get_project(123)
        except HTTPStatusError as e:
            print(f"Status: {e.status_code}")
            print(f"Body: {e.body}")
        ```
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int,
        body: str = "",
        request_method: str | None = None,
        request_url: str | None = None,
        code: str = "HTTP_ERROR",
    ) -> None:
        """Initialize HTTPStatusError.

        Args:
            message: Human-readable error message. Derived from the status
                code and body when omitted.
            status_code: HTTP status code from response.
            body: Raw response body text.
            request_method: HTTP method used.
            request_url: Full request URL.
            code: Machine-readable error code.
        """
        self._status_code = status_code
        self._body = body
        self._request_method = request_method
        self._request_url = request_url

        if message is None:
            message = f"HTTP {status_code}"
            if body:
                message = f"{message}: {body[:200]}"

        details: dict[str, Any] = {
            "status_code": status_code,
            "body": body,
        }
        if request_method is not None:
            details["request_method"] = request_method
        if request_url is not None:
            details["request_url"] = request_url

        super().__init__(message, code=code, details=details)

    @property
    def status_code(self) -> int:
        """HTTP status code from response."""
        return self._status_code

    @property
    def body(self) -> str:
        """Raw response body text."""
        return self._body

    @property
    def request_method(self) -> str | None:
        """HTTP method used."""
        return self._request_method

    @property
    def request_url(self) -> str | None:
        """Full request URL."""
        return self._request_url


class AuthenticationError(HTTPStatusError):
    """Service account credentials were rejected (HTTP 401)."""

    def __init__(
        self,
        message: str = "Invalid service account credentials",
        *,
        status_code: int = 401,
        body: str = "",
        request_method: str | None = None,
        request_url: str | None = None,
    ) -> None:
        """Initialize AuthenticationError."""
        super().__init__(
            message,
            status_code=status_code,
            body=body,
            request_method=request_method,
            request_url=request_url,
            code="AUTH_FAILED",
        )


class RateLimitError(HTTPStatusError):
    """Mixpanel API rate limit exceeded (HTTP 429).

    Raised once the retry policy gives up. ``retry_after`` carries the
    Retry-After header value when Mixpanel sent one.
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        retry_after: int | None = None,
        status_code: int = 429,
        body: str = "",
        request_method: str | None = None,
        request_url: str | None = None,
    ) -> None:
        """Initialize RateLimitError.

        Args:
            message: Human-readable error message.
            retry_after: Seconds until retry is allowed (from Retry-After header).
            status_code: HTTP status code (default 429).
            body: Raw response body text.
            request_method: HTTP method used.
            request_url: Full request URL.
        """
        self._retry_after = retry_after
        super().__init__(
            message,
            status_code=status_code,
            body=body,
            request_method=request_method,
            request_url=request_url,
            code="RATE_LIMITED",
        )
        if retry_after is not None:
            self._details["retry_after"] = retry_after

    @property
    def retry_after(self) -> int | None:
        """Seconds until retry is allowed, or None if unknown."""
        return self._retry_after


class ServerError(HTTPStatusError):
    """Mixpanel server error (HTTP 5xx).

    These are usually transient and are retried by the transport before
    this is raised.
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int = 500,
        body: str = "",
        request_method: str | None = None,
        request_url: str | None = None,
    ) -> None:
        """Initialize ServerError."""
        super().__init__(
            message,
            status_code=status_code,
            body=body,
            request_method=request_method,
            request_url=request_url,
            code="SERVER_ERROR",
        )


# Decoding Exceptions


class DecodeError(MixpanelAdminError):
    """A response did not have the expected JSON shape.

    Never retried: repeating the request will not fix a shape mismatch.
    """

    def __init__(self, field: str, raw_value: Any, reason: str | None = None) -> None:
        """Initialize DecodeError.

        Args:
            field: Dotted path of the offending field (e.g. "results[3][0]").
            raw_value: The value that could not be decoded.
            reason: Optional explanation appended to the message.
        """
        message = f"Cannot decode {field}: unexpected value {raw_value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            message,
            code="DECODE_ERROR",
            details={"field": field, "raw_value": repr(raw_value)},
        )
        self._field = field
        self._raw_value = raw_value

    @property
    def field(self) -> str:
        """Dotted path of the offending field."""
        return self._field

    @property
    def raw_value(self) -> Any:
        """The value that could not be decoded."""
        return self._raw_value


# Domain Exceptions


class NoOrganizationError(MixpanelAdminError):
    """The service account belongs to no organization.

    Project creation needs an organization to create the project in.
    """

    def __init__(self) -> None:
        """Initialize NoOrganizationError."""
        super().__init__(
            "No organization found for this service account",
            code="NO_ORGANIZATION",
        )


class TimezoneNotFoundError(MixpanelAdminError):
    """Requested timezone name is not in Mixpanel's timezone list.

    Matching is exact and case-sensitive.
    """

    def __init__(self, name: str) -> None:
        """Initialize TimezoneNotFoundError.

        Args:
            name: The timezone name that wasn't found.
        """
        super().__init__(
            f"Timezone not found: {name}",
            code="TIMEZONE_NOT_FOUND",
            details={"name": name},
        )

    @property
    def name(self) -> str:
        """The timezone name that wasn't found."""
        return str(self._details.get("name", ""))


class UnsupportedOperationError(MixpanelAdminError):
    """Operation cannot be performed with a service account.

    Used for project deletion and for changing a project's data residency
    domain, neither of which Mixpanel exposes to service accounts.
    """

    def __init__(self, operation: str, reason: str) -> None:
        """Initialize UnsupportedOperationError.

        Args:
            operation: Name of the refused operation.
            reason: Why it is refused.
        """
        super().__init__(
            f"{operation} is not supported: {reason}",
            code="UNSUPPORTED_OPERATION",
            details={"operation": operation, "reason": reason},
        )

    @property
    def operation(self) -> str:
        """Name of the refused operation."""
        return str(self._details.get("operation", ""))
