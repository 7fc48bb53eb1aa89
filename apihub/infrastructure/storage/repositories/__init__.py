"""Repository implementations for the API hub.

Implements Repository pattern with Dependency Inversion principle.
"""

from apihub.infrastructure.storage.repositories.base import BaseRepository
from apihub.infrastructure.storage.repositories.connections import ConnectionRepository
from apihub.infrastructure.storage.repositories.history import HistoryRepository
from apihub.infrastructure.storage.repositories.schedules import ScheduleRepository
from apihub.infrastructure.storage.repositories.settings import SettingsRepository

__all__ = [
    "BaseRepository",
    "ConnectionRepository",
    "HistoryRepository",
    "ScheduleRepository",
    "SettingsRepository",
]
