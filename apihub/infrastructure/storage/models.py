"""Storage models for the API hub.

Type-safe dataclasses representing persisted records. Each record converts to
and from the JSON document stored by the persistence backend.
"""

from dataclasses import asdict, dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Dict, List, Optional

from apihub.utils.scheduling import format_timestamp, parse_timestamp

AUTH_TYPES = ("none", "bearer", "basic", "apikey", "custom")
AUTH_LOCATIONS = ("header", "query")
DEFAULT_COLOR = "#6366f1"


def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


@dataclass
class Capability:
    """A named, pre-templated operation available on a connection."""

    id: str
    endpoint: str
    method: str = "GET"
    name: str = ""
    description: str = ""
    body_template: Optional[Any] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Capability":
        return cls(**_known_fields(cls, data))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ConnectionProfile:
    """Stored configuration describing how to reach and authenticate to one API."""

    id: str
    name: str
    base_url: str
    auth_type: str = "none"
    auth_param: str = ""
    auth_in: str = "header"
    auth_prefix: str = ""
    auth_value: str = ""
    extra_headers: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    capabilities: List[Capability] = field(default_factory=list)
    catalog_id: Optional[str] = None
    description: str = ""
    color: str = DEFAULT_COLOR
    icon: str = ""
    category: str = ""
    created: Optional[datetime] = None
    last_used: Optional[datetime] = None
    request_count: int = 0

    def find_capability(self, capability_id: str) -> Optional[Capability]:
        """Look up a capability by id. Absence is a normal outcome."""
        for capability in self.capabilities:
            if capability.id == capability_id:
                return capability
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConnectionProfile":
        values = _known_fields(cls, data)
        values["capabilities"] = [
            c if isinstance(c, Capability) else Capability.from_dict(c)
            for c in values.get("capabilities") or []
        ]
        values["created"] = parse_timestamp(values.get("created"))
        values["last_used"] = parse_timestamp(values.get("last_used"))
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["created"] = format_timestamp(self.created)
        data["last_used"] = format_timestamp(self.last_used)
        return data


@dataclass
class ScheduledJob:
    """Recurring binding of a connection, one of its capabilities and fixed params.

    connection_id and capability_id are lookups by id and may dangle.
    """

    id: str
    connection_id: str
    capability_id: str
    interval_min: int
    name: str = "Scheduled job"
    params: Dict[str, Any] = field(default_factory=dict)
    enabled: bool = True
    last_run: Optional[datetime] = None
    next_run: Optional[datetime] = None
    run_count: int = 0
    last_result: Optional[Dict[str, Any]] = None
    created: Optional[datetime] = None

    def is_due(self, now: datetime) -> bool:
        return self.enabled and self.next_run is not None and self.next_run <= now

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScheduledJob":
        values = _known_fields(cls, data)
        for key in ("last_run", "next_run", "created"):
            values[key] = parse_timestamp(values.get(key))
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("last_run", "next_run", "created"):
            data[key] = format_timestamp(getattr(self, key))
        return data


@dataclass(frozen=True)
class HistoryEntry:
    """Immutable record of one executed (or attempted) outbound call.

    Connection name and color are copied at execution time so the entry stays
    displayable after the profile is deleted. status 0 means transport failure.
    """

    id: str
    connection_id: str
    connection_name: str
    connection_color: str
    method: str
    url: str
    endpoint: str
    status: int
    status_text: str
    elapsed: int
    response_body: Any
    response_type: str
    timestamp: str
    response_headers: Dict[str, str] = field(default_factory=dict)
    request_body: Any = None

    def summary(self) -> Dict[str, int]:
        """Compact result recorded on scheduled jobs."""
        return {"status": self.status, "elapsed": self.elapsed}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        return cls(**_known_fields(cls, data))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def merge_fields(record, updates: Dict[str, Any], protected: tuple = ("id",)):
    """Return a copy of a dataclass record with updates applied, skipping protected fields."""
    allowed = {k: v for k, v in _known_fields(type(record), updates).items() if k not in protected}
    return replace(record, **allowed)
