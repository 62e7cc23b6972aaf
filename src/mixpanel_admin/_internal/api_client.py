"""Mixpanel API Client.

Low-level HTTP client for the Mixpanel app endpoints used to manage
organizations, projects and timezones. Handles:
- Service account authentication via HTTP Basic auth
- Bounded request concurrency with cancellable acquisition
- Retries with exponential backoff for network errors, 429 and 5xx
- An absolute deadline per attempt, response body included
- Classification of non-2xx responses into typed exceptions

Responses are returned as raw bytes; decoding lives in
mixpanel_admin._internal.decoders.

This is a private implementation detail. Users should use MixpanelClient
instead of accessing this module directly.
"""

from __future__ import annotations

import base64
import contextlib
import logging
import random
import threading
import time
from typing import TYPE_CHECKING, Any

import httpx

from mixpanel_admin._internal.config import ClientOptions, Credentials
from mixpanel_admin._internal.rate_limiter import RateLimiter
from mixpanel_admin.exceptions import (
    AuthenticationError,
    HTTPStatusError,
    RateLimitError,
    RequestCancelledError,
    ServerError,
    TransportError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

logger = logging.getLogger(__name__)

MAX_BACKOFF = 60.0


class _DeadlineStream(httpx.SyncByteStream):
    """Response stream that fails once an absolute deadline has passed."""

    def __init__(
        self,
        stream: httpx.SyncByteStream | httpx.AsyncByteStream,
        deadline: float,
        timeout: float,
        request: httpx.Request,
    ) -> None:
        self._stream = stream
        self._deadline = deadline
        self._timeout = timeout
        self._request = request

    def _check(self) -> None:
        if time.monotonic() > self._deadline:
            raise httpx.ReadTimeout(
                f"Attempt exceeded {self._timeout:g}s", request=self._request
            )

    def __iter__(self) -> Iterator[bytes]:
        self._check()
        for chunk in self._stream:  # type: ignore[union-attr]
            self._check()
            yield chunk

    def close(self) -> None:
        self._stream.close()  # type: ignore[union-attr]


class MixpanelAPIClient:
    """Low-level HTTP client for Mixpanel app APIs.

    One instance owns one ``httpx.Client`` and one concurrency gate, and is
    safe to share between threads.

    Example:
        ```python
        credentials = Credentials.from_values("sa-user", "sa-secret")

        with MixpanelAPIClient(credentials) as client:
            body = client.get_timezones()
        ```
    """

    def __init__(
        self,
        credentials: Credentials,
        options: ClientOptions | None = None,
        *,
        _transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the API client.

        Args:
            credentials: Immutable authentication credentials.
            options: Transport options (host, timeout, retries, concurrency).
            _transport: Internal parameter for testing with MockTransport.
        """
        self._credentials = credentials
        self._options = options or ClientOptions()
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()
        self._transport = _transport
        self._auth_header = self._get_auth_header()
        self._limiter: RateLimiter | None = None
        if self._options.concurrent_requests > 0:
            self._limiter = RateLimiter(self._options.concurrent_requests)

    @property
    def host_url(self) -> str:
        """Base URL all paths are relative to."""
        return self._options.host_url

    @property
    def limiter(self) -> RateLimiter | None:
        """Concurrency gate, or None when concurrency is unlimited."""
        return self._limiter

    def _get_auth_header(self) -> str:
        """Generate HTTP Basic auth header value.

        Returns:
            Base64-encoded "username:secret" prefixed with "Basic ".
        """
        secret = self._credentials.secret.get_secret_value()
        auth_string = f"{self._credentials.username}:{secret}"
        encoded = base64.b64encode(auth_string.encode()).decode()
        return f"Basic {encoded}"

    def _build_url(self, path: str) -> str:
        """Build full URL for the given path.

        Args:
            path: API endpoint path (e.g., "/api/app/timezones").

        Returns:
            Full URL for the endpoint.
        """
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self._options.host_url}{path}"

    def _ensure_client(self) -> httpx.Client:
        """Ensure HTTP client is initialized.

        Returns:
            The httpx.Client instance.
        """
        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(
                    timeout=self._options.timeout,
                    transport=self._transport,
                )
            return self._client

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def __enter__(self) -> MixpanelAPIClient:
        """Enter context manager."""
        self._ensure_client()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit context manager, closing client."""
        self.close()

    @contextlib.contextmanager
    def _slot(self, cancel: threading.Event | None) -> Iterator[None]:
        if self._limiter is None:
            if cancel is not None and cancel.is_set():
                raise RequestCancelledError("Request cancelled before dispatch")
            yield
            return
        with self._limiter.acquire(cancel=cancel):
            yield

    def _calculate_backoff(self, attempt: int) -> float:
        """Calculate exponential backoff delay with jitter.

        Formula: min(factor * 2^attempt, 60.0) + random(0, delay * 0.1)

        Args:
            attempt: Zero-based attempt number (0, 1, 2, ...).

        Returns:
            Delay in seconds including jitter.
        """
        delay: float = min(self._options.backoff_factor * (2**attempt), MAX_BACKOFF)
        jitter: float = random.uniform(0, delay * 0.1)  # noqa: S311
        return delay + jitter

    def _parse_retry_after(self, response: httpx.Response) -> int | None:
        """Parse Retry-After header if present.

        Args:
            response: HTTP response.

        Returns:
            Seconds to wait, or None if header not present.
        """
        retry_after = response.headers.get("Retry-After")
        if retry_after is not None:
            try:
                return int(retry_after)
            except ValueError:
                pass
        return None

    def _sleep(self, seconds: float, cancel: threading.Event | None) -> None:
        if cancel is None:
            time.sleep(seconds)
        elif cancel.wait(seconds):
            raise RequestCancelledError("Request cancelled during retry backoff")

    def _send_with_deadline(
        self, client: httpx.Client, request: httpx.Request
    ) -> httpx.Response:
        """Send one attempt and read its body within ``options.timeout``.

        httpx bounds each connect, read and write wait separately; the
        attempt as a whole, body included, is bounded here.

        Raises:
            httpx.ReadTimeout: The deadline passed before the body was read.
        """
        timeout = self._options.timeout
        deadline = time.monotonic() + timeout
        response = client.send(request, stream=True)
        try:
            response.stream = _DeadlineStream(
                response.stream, deadline, timeout, request
            )
            response.read()
        finally:
            response.close()
        return response

    def _raise_for_status(
        self, response: httpx.Response, method: str, url: str
    ) -> None:
        """Raise the exception matching a non-2xx response.

        Status code handling:
            - 200-299: no exception
            - 401: AuthenticationError
            - 429: RateLimitError
            - 5xx: ServerError
            - anything else: HTTPStatusError

        Raises:
            HTTPStatusError: Or one of its subclasses, carrying the raw body.
        """
        status = response.status_code
        if 200 <= status < 300:
            return

        body = response.text
        if status == 401:
            raise AuthenticationError(
                body=body, request_method=method, request_url=url
            )
        if status == 429:
            raise RateLimitError(
                "Rate limit exceeded after max retries",
                retry_after=self._parse_retry_after(response),
                body=body,
                request_method=method,
                request_url=url,
            )
        if status >= 500:
            raise ServerError(
                status_code=status, body=body, request_method=method, request_url=url
            )
        raise HTTPStatusError(
            status_code=status, body=body, request_method=method, request_url=url
        )

    def _execute_with_retry(
        self,
        method: str,
        url: str,
        *,
        json_body: dict[str, Any] | None,
        form_data: dict[str, Any] | None,
        headers: dict[str, str],
        cancel: threading.Event | None,
    ) -> bytes:
        """Execute HTTP request with retry logic for transient failures.

        Network errors, 429 and 5xx responses are retried up to
        ``max_retries`` times. Other 4xx responses fail immediately.

        Returns:
            Raw response body of the first 2xx response.

        Raises:
            TransportError: Network failure after all attempts.
            HTTPStatusError: Non-2xx response (after retries where applicable).
            RequestCancelledError: ``cancel`` was set between attempts.
        """
        client = self._ensure_client()
        max_retries = self._options.max_retries

        for attempt in range(max_retries + 1):
            if cancel is not None and cancel.is_set():
                raise RequestCancelledError("Request cancelled before retry")

            request = client.build_request(
                method, url, json=json_body, data=form_data, headers=headers
            )
            try:
                response = self._send_with_deadline(client, request)
            except httpx.TransportError as e:
                if attempt >= max_retries:
                    raise TransportError(
                        f"HTTP error: {e}",
                        request_method=method,
                        request_url=url,
                        attempts=attempt + 1,
                    ) from e
                wait_time = self._calculate_backoff(attempt)
                logger.warning(
                    "Network error on %s %s (%s), retrying in %.1f seconds "
                    "(attempt %d/%d)",
                    method,
                    url,
                    e,
                    wait_time,
                    attempt + 1,
                    max_retries,
                )
                self._sleep(wait_time, cancel)
                continue
            except httpx.HTTPError as e:
                raise TransportError(
                    f"HTTP error: {e}",
                    request_method=method,
                    request_url=url,
                    attempts=attempt + 1,
                ) from e

            status = response.status_code
            retryable = status == 429 or status >= 500
            if retryable and attempt < max_retries:
                retry_after = None
                if status == 429:
                    retry_after = self._parse_retry_after(response)
                if retry_after is not None:
                    wait_time = float(retry_after)
                else:
                    wait_time = self._calculate_backoff(attempt)
                logger.warning(
                    "HTTP %d from %s %s, retrying in %.1f seconds (attempt %d/%d)",
                    status,
                    method,
                    url,
                    wait_time,
                    attempt + 1,
                    max_retries,
                )
                self._sleep(wait_time, cancel)
                continue

            self._raise_for_status(response, method, url)
            return response.content

        # Loop always returns or raises; kept for the type checker.
        raise TransportError(
            "Request failed after max retries",
            request_method=method,
            request_url=url,
            attempts=max_retries + 1,
        )

    def send(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        form_data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        cancel: threading.Event | None = None,
    ) -> bytes:
        """Make an authenticated, throttled request to a Mixpanel path.

        Waits for a concurrency slot, then runs the request with the retry
        policy. The slot is held across retries and always released.

        Args:
            method: HTTP method (GET, POST).
            path: Path relative to the host URL.
            json_body: Optional JSON request body.
            form_data: Optional form-encoded request body.
            headers: Optional additional headers (Authorization is added
                automatically).
            cancel: Optional event that aborts the request while it waits
                for a slot or between retries.

        Returns:
            Raw response body bytes.

        Raises:
            RequestCancelledError: ``cancel`` was set before completion.
            TransportError: Network failure.
            HTTPStatusError: Non-2xx response.
        """
        url = self._build_url(path)
        request_headers = {"Authorization": self._auth_header}
        if headers:
            request_headers.update(headers)

        logger.debug("send - method: %s, url: %s", method, url)

        with self._slot(cancel):
            return self._execute_with_retry(
                method,
                url,
                json_body=json_body,
                form_data=form_data,
                headers=request_headers,
                cancel=cancel,
            )

    # =========================================================================
    # Organizations
    # =========================================================================

    def get_me(self, *, cancel: threading.Event | None = None) -> bytes:
        """Fetch the service account's profile, including its organizations.

        Workspace users are excluded, which makes the call much faster.

        Returns:
            Raw JSON body of /api/app/me.
        """
        return self.send(
            "GET", "/api/app/me?include_workspace_users=false", cancel=cancel
        )

    # =========================================================================
    # Projects
    # =========================================================================

    def get_project_metadata(
        self, project_id: int, *, cancel: threading.Event | None = None
    ) -> bytes:
        """Fetch a project's metadata.

        Args:
            project_id: Project identifier.

        Returns:
            Raw JSON body of /settings/project/{id}/metadata.
        """
        return self.send(
            "GET", f"/settings/project/{project_id}/metadata", cancel=cancel
        )

    def create_project(
        self,
        organization_id: int,
        payload: dict[str, Any],
        *,
        cancel: threading.Event | None = None,
    ) -> bytes:
        """Create a project inside an organization.

        Args:
            organization_id: Organization to create the project in.
            payload: JSON body with project_name, cluster_id and timezone_id.

        Returns:
            Raw JSON body of the create-project response.
        """
        return self.send(
            "POST",
            f"/api/app/organizations/{organization_id}/create-project",
            json_body=payload,
            cancel=cancel,
        )

    def update_project(
        self,
        project_id: int,
        form: dict[str, Any],
        *,
        cancel: threading.Event | None = None,
    ) -> bytes:
        """Update project settings through the form endpoint.

        The endpoint requires a Referer header pointing at the host.

        Args:
            project_id: Project identifier.
            form: Form fields to update.

        Returns:
            Raw response body.
        """
        return self.send(
            "POST",
            f"/projects/update/{project_id}",
            form_data=form,
            headers={"Referer": self._options.host_url},
            cancel=cancel,
        )

    # =========================================================================
    # Timezones
    # =========================================================================

    def get_timezones(self, *, cancel: threading.Event | None = None) -> bytes:
        """Fetch the timezone reference list.

        Returns:
            Raw JSON body of /api/app/timezones.
        """
        return self.send("GET", "/api/app/timezones", cancel=cancel)
