"""Storage module for the API hub.

Provides persistence backends and the repositories built on them.
"""

from apihub.infrastructure.storage.backends import (
    DocumentBackend,
    FileBackend,
    MemoryBackend,
    SupabaseBackend,
    create_backend,
)
from apihub.infrastructure.storage.models import (
    Capability,
    ConnectionProfile,
    HistoryEntry,
    ScheduledJob,
)
from apihub.infrastructure.storage.repositories import (
    BaseRepository,
    ConnectionRepository,
    HistoryRepository,
    ScheduleRepository,
    SettingsRepository,
)

__all__ = [
    "DocumentBackend",
    "FileBackend",
    "MemoryBackend",
    "SupabaseBackend",
    "create_backend",
    "Capability",
    "ConnectionProfile",
    "HistoryEntry",
    "ScheduledJob",
    "BaseRepository",
    "ConnectionRepository",
    "HistoryRepository",
    "ScheduleRepository",
    "SettingsRepository",
]
