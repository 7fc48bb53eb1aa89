"""Connection profile repository for the API hub."""

from datetime import datetime
from typing import Any, Dict, Optional

from apihub.core.logging import logger
from apihub.infrastructure.storage.models import ConnectionProfile
from apihub.infrastructure.storage.repositories.base import BaseRepository


class ConnectionRepository(BaseRepository[ConnectionProfile]):
    """Connection Store: in-memory table of profiles, persisted on every mutation."""

    def document_name(self) -> str:
        return "connections"

    def from_dict(self, data: Dict[str, Any]) -> ConnectionProfile:
        return ConnectionProfile.from_dict(data)

    def to_dict(self, item: ConnectionProfile) -> Dict[str, Any]:
        return item.to_dict()

    def get_by_id(self, connection_id: str) -> Optional[ConnectionProfile]:
        """Look up a profile. Returns None when absent."""
        for profile in self._items:
            if profile.id == connection_id:
                return profile
        return None

    async def add(self, profile: ConnectionProfile) -> ConnectionProfile:
        async with self._lock:
            self._items.append(profile)
            await self._save_locked()
        logger.info("connection_added", connection_id=profile.id, name=profile.name)
        return profile

    async def delete(self, connection_id: str) -> bool:
        """Remove a profile. History entries and jobs referencing it are left alone."""
        async with self._lock:
            before = len(self._items)
            self._items = [p for p in self._items if p.id != connection_id]
            removed = len(self._items) != before
            if removed:
                await self._save_locked()
        if removed:
            logger.info("connection_deleted", connection_id=connection_id)
        return removed

    async def record_usage(self, connection_id: str, timestamp: datetime) -> Optional[ConnectionProfile]:
        """Bump last_used and request_count for one outbound call."""
        async with self._lock:
            profile = self.get_by_id(connection_id)
            if profile is None:
                return None
            profile.last_used = timestamp
            profile.request_count += 1
            await self._save_locked()
            return profile
