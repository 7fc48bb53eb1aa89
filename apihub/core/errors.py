"""Error types for the API hub.

Only configuration problems and unknown connection ids abort an operation.
Transport failures, upstream HTTP errors and undecodable bodies are recorded
as data on the resulting history entry instead.
"""


class HubError(Exception):
    """Base class for errors raised to callers of the hub."""


class ConfigurationError(HubError):
    """A profile or job is missing required fields. Raised before any state changes."""


class ConnectionNotFound(HubError):
    """No connection profile exists for the given id."""

    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        super().__init__(f"Connection '{connection_id}' not found")


class ScheduleNotFound(HubError):
    """No scheduled job exists for the given id."""

    def __init__(self, schedule_id: str):
        self.schedule_id = schedule_id
        super().__init__(f"Schedule '{schedule_id}' not found")


class StorageError(HubError):
    """A persistence backend could not be reached or written."""
