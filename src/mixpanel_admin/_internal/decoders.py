"""Response decoders for Mixpanel app endpoints.

Every endpoint wraps its payload in a ``{"status": ..., "results": ...}``
envelope. Three result shapes are handled here:

- Objects (project metadata, create-project): decoded field by field.
- Map of values (organizations): keys are discarded, values kept. Mapping
  order is whatever the server sent and must not be relied on.
- Tuple rows (timezones): ``[[id, name], ...]`` where each row is a
  heterogeneous pair. Element types are checked explicitly and a mismatch
  raises DecodeError naming the offending value.
"""

from __future__ import annotations

import json
from typing import Any

from mixpanel_admin.exceptions import DecodeError
from mixpanel_admin.types import Organization, Project, Timezone, domain_from_host


def _as_int(value: Any, field: str) -> int:
    """Coerce an integer-valued JSON number.

    Booleans, strings and non-integral floats are rejected.
    """
    if isinstance(value, bool):
        raise DecodeError(field, value, "expected an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise DecodeError(field, value, "expected an integer")


def _as_str(value: Any, field: str) -> str:
    """Read a JSON string, treating missing/null as empty."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(field, value, "expected a string")
    return value


def _as_object(value: Any, field: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(field, value, "expected an object")
    return value


def decode_envelope(content: bytes) -> Any:
    """Parse a response body and return its ``results`` payload.

    Args:
        content: Raw response body.

    Returns:
        The value of the top-level "results" key.

    Raises:
        DecodeError: If the body is not JSON or has no "results" key.
    """
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(
            "body", content[:200].decode(errors="replace"), str(e)
        ) from e
    envelope = _as_object(data, "body")
    if "results" not in envelope:
        raise DecodeError("results", None, "missing results key")
    return envelope["results"]


def decode_organizations(content: bytes) -> list[Organization]:
    """Decode the /api/app/me response into organizations.

    Args:
        content: Raw response body.

    Returns:
        One Organization per entry of ``results.organizations``, in the
        order the server listed them. Empty when the account has none.

    Raises:
        DecodeError: If the shape does not match.
    """
    results = _as_object(decode_envelope(content), "results")
    organizations = results.get("organizations")
    if organizations is None:
        return []
    organizations = _as_object(organizations, "results.organizations")

    decoded = []
    for key, value in organizations.items():
        path = f"results.organizations.{key}"
        org = _as_object(value, path)
        decoded.append(
            Organization(
                id=_as_int(org.get("id"), f"{path}.id"),
                name=_as_str(org.get("name"), f"{path}.name"),
            )
        )
    return decoded


def decode_project(content: bytes) -> Project:
    """Decode a project metadata response.

    The raw ``domain`` hostname is mapped to a Domain: eu.mixpanel.com is
    EU, anything else is US.

    Args:
        content: Raw response body.

    Returns:
        Fully populated Project.

    Raises:
        DecodeError: If the shape does not match.
    """
    results = _as_object(decode_envelope(content), "results")
    return Project(
        id=_as_int(results.get("id"), "results.id"),
        name=_as_str(results.get("name"), "results.name"),
        domain=domain_from_host(_as_str(results.get("domain"), "results.domain")),
        timezone=_as_str(results.get("timezone_name"), "results.timezone_name"),
        api_key=_as_str(results.get("api_key"), "results.api_key"),
        token=_as_str(results.get("token"), "results.token"),
        secret=_as_str(results.get("secret"), "results.secret"),
    )


def decode_project_id(content: bytes) -> int:
    """Decode the id assigned by a create-project response.

    Args:
        content: Raw response body.

    Returns:
        New project identifier.

    Raises:
        DecodeError: If the shape does not match.
    """
    results = _as_object(decode_envelope(content), "results")
    return _as_int(results.get("id"), "results.id")


def decode_timezones(content: bytes) -> list[Timezone]:
    """Decode the /api/app/timezones tuple rows.

    Each row must be a sequence whose first element is an integer-valued
    number and whose second element is a string. Extra elements are
    ignored.

    Args:
        content: Raw response body.

    Returns:
        One Timezone per row, in server order.

    Raises:
        DecodeError: If a row is malformed. Never defaults to zero.
    """
    results = decode_envelope(content)
    if not isinstance(results, list):
        raise DecodeError("results", results, "expected a list of rows")

    timezones = []
    for index, row in enumerate(results):
        path = f"results[{index}]"
        if not isinstance(row, list) or len(row) < 2:
            raise DecodeError(path, row, "expected an [id, name] pair")
        if not isinstance(row[1], str):
            raise DecodeError(f"{path}[1]", row[1], "expected a string")
        timezones.append(Timezone(id=_as_int(row[0], f"{path}[0]"), name=row[1]))
    return timezones
