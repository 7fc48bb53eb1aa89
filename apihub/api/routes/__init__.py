"""Routes for the API hub."""

from apihub.api.routes import (
    catalog,
    connections,
    events,
    history,
    requests,
    schedules,
    settings,
    system,
)

__all__ = [
    "catalog",
    "connections",
    "events",
    "history",
    "requests",
    "schedules",
    "settings",
    "system",
]
