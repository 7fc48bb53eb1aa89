"""Auth resolver for the API hub.

Computes the single authentication artifact a connection profile contributes
to an outbound request.
"""

import base64
from dataclasses import dataclass
from typing import Dict, Optional

from apihub.infrastructure.storage.models import ConnectionProfile


@dataclass(frozen=True)
class AuthArtifact:
    """One header or query entry carrying credentials."""

    location: str  # "header" or "query"
    name: str
    value: str


class AuthResolver:
    """Resolves a profile's auth fields into headers or query parameters.

    Pure functions with no side effects for easy testing. Misconfigured
    profiles produce no artifact rather than an error.
    """

    @staticmethod
    def resolve(profile: ConnectionProfile) -> Optional[AuthArtifact]:
        """Compute the auth artifact for a profile, or None.

        Examples:
            bearer, header  -> Authorization: Bearer <value>
            basic, header   -> Authorization: Basic <base64(value)>
            apikey + prefix -> <auth_param>: <prefix><value>
            anything else   -> <auth_param>: <value>
        """
        auth_type = (profile.auth_type or "none").lower()
        if auth_type == "none" or not profile.auth_param or not profile.auth_value:
            return None

        location = "query" if profile.auth_in == "query" else "header"
        value = profile.auth_value

        if location == "header":
            if auth_type == "bearer":
                return AuthArtifact(location, "Authorization", f"Bearer {value}")
            if auth_type == "basic":
                encoded = base64.b64encode(value.encode("utf-8")).decode("ascii")
                return AuthArtifact(location, "Authorization", f"Basic {encoded}")

        if auth_type in ("apikey", "custom") and profile.auth_prefix:
            value = profile.auth_prefix + value

        return AuthArtifact(location, profile.auth_param, value)

    @staticmethod
    def apply(
        profile: ConnectionProfile, headers: Dict[str, str], query: Dict[str, str]
    ) -> None:
        """Inject the profile's auth artifact into headers or query.

        The artifact is authoritative: it replaces any existing entry with the
        same name (case-insensitive for headers).
        """
        artifact = AuthResolver.resolve(profile)
        if artifact is None:
            return
        if artifact.location == "query":
            query[artifact.name] = artifact.value
        else:
            set_header(headers, artifact.name, artifact.value)


def set_header(headers: Dict[str, str], name: str, value: str) -> None:
    """Set a header, dropping any existing entries that differ only in case."""
    for existing in [k for k in headers if k.lower() == name.lower()]:
        del headers[existing]
    headers[name] = value


def has_header(headers: Dict[str, str], name: str) -> bool:
    return any(k.lower() == name.lower() for k in headers)
