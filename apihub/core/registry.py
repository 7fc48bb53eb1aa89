"""Profile and job registration for the API hub.

Builds new connection profiles and scheduled jobs from request data and
applies partial updates. Validation happens before any state changes.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from apihub.core.errors import ConfigurationError
from apihub.infrastructure.catalog import Catalog
from apihub.infrastructure.storage.models import (
    AUTH_LOCATIONS,
    AUTH_TYPES,
    DEFAULT_COLOR,
    Capability,
    ConnectionProfile,
    ScheduledJob,
    merge_fields,
)
from apihub.utils.scheduling import calculate_next_run_at, clamp_interval, utc_now

PROFILE_PROTECTED_FIELDS = ("id", "created", "request_count")


def _validate_auth(auth_type: str, auth_in: str) -> None:
    if auth_type not in AUTH_TYPES:
        raise ConfigurationError(f"Invalid auth_type: {auth_type}. Must be one of {', '.join(AUTH_TYPES)}")
    if auth_in not in AUTH_LOCATIONS:
        raise ConfigurationError(f"Invalid auth_in: {auth_in}. Must be 'header' or 'query'")


def _capabilities(raw) -> list:
    return [c if isinstance(c, Capability) else Capability.from_dict(c) for c in raw or []]


def build_profile(data: Dict[str, Any], catalog: Catalog, now: Optional[datetime] = None) -> ConnectionProfile:
    """Create a connection profile from scratch or from a catalog template.

    Args:
        data: Request fields. With catalog_id only auth_value is personalised.
        catalog: Catalog to resolve catalog_id against
        now: Creation time (defaults to now)

    Returns:
        New ConnectionProfile with a fresh id

    Raises:
        ConfigurationError: If the catalog id is unknown or name/base_url are missing
    """
    now = now or utc_now()
    catalog_id = data.get("catalog_id")

    if catalog_id:
        template = catalog.get(catalog_id)
        if template is None:
            raise ConfigurationError(f"Catalog entry '{catalog_id}' not found")
        profile = ConnectionProfile(
            id=str(uuid.uuid4()),
            catalog_id=template["id"],
            name=template["name"],
            base_url=template["base_url"].rstrip("/"),
            auth_type=template.get("auth_type") or "none",
            auth_param=template.get("auth_param") or "",
            auth_in=template.get("auth_in") or "header",
            auth_prefix=template.get("auth_prefix") or "",
            auth_value=data.get("auth_value") or "",
            extra_headers=dict(template.get("extra_headers") or {}),
            headers={},
            description=template.get("description") or "",
            color=template.get("color") or DEFAULT_COLOR,
            icon=template.get("icon") or template["name"][:1],
            category=template.get("category") or "",
            capabilities=_capabilities(template.get("capabilities")),
            created=now,
        )
    else:
        name = (data.get("name") or "").strip()
        base_url = (data.get("base_url") or "").strip()
        if not name or not base_url:
            raise ConfigurationError("name and base_url required")
        profile = ConnectionProfile(
            id=str(uuid.uuid4()),
            name=name,
            base_url=base_url.rstrip("/"),
            auth_type=data.get("auth_type") or "none",
            auth_param=data.get("auth_param") or "",
            auth_in=data.get("auth_in") or "header",
            auth_prefix=data.get("auth_prefix") or "",
            auth_value=data.get("auth_value") or "",
            headers=dict(data.get("headers") or {}),
            description=data.get("description") or "",
            icon=name[:1].upper(),
            category="Custom",
            capabilities=_capabilities(data.get("capabilities")),
            created=now,
        )

    _validate_auth(profile.auth_type, profile.auth_in)
    return profile


def update_profile(profile: ConnectionProfile, changes: Dict[str, Any]) -> ConnectionProfile:
    """Return a copy of the profile with changes merged in. id is never changed."""
    changes = dict(changes)
    if "capabilities" in changes:
        changes["capabilities"] = _capabilities(changes["capabilities"])
    if changes.get("base_url"):
        changes["base_url"] = changes["base_url"].rstrip("/")
    updated = merge_fields(profile, changes, protected=PROFILE_PROTECTED_FIELDS)
    _validate_auth(updated.auth_type, updated.auth_in)
    return updated


def build_schedule(data: Dict[str, Any], now: Optional[datetime] = None) -> ScheduledJob:
    """Create a recurring job. The first run is one interval after creation.

    Raises:
        ConfigurationError: If connection_id, capability_id or interval_min is missing
    """
    now = now or utc_now()
    missing_ids = not data.get("connection_id") or not data.get("capability_id")
    if missing_ids or data.get("interval_min") is None:
        raise ConfigurationError("connection_id, capability_id, interval_min required")

    interval_min = clamp_interval(data["interval_min"])
    return ScheduledJob(
        id=str(uuid.uuid4()),
        name=data.get("name") or "Scheduled job",
        connection_id=data["connection_id"],
        capability_id=data["capability_id"],
        params=dict(data.get("params") or {}),
        interval_min=interval_min,
        enabled=data.get("enabled", True),
        next_run=calculate_next_run_at(interval_min, now),
        created=now,
    )


def update_schedule(job: ScheduledJob, changes: Dict[str, Any]) -> ScheduledJob:
    """Return a copy of the job with changes merged in. interval_min is re-clamped."""
    changes = dict(changes)
    if changes.get("interval_min") is not None:
        changes["interval_min"] = clamp_interval(changes["interval_min"])
    return merge_fields(job, changes, protected=("id", "created", "run_count"))
