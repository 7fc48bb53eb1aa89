"""History log repository for the API hub."""

from typing import Any, Dict, List, Optional

from apihub.infrastructure.storage.backends import DocumentBackend
from apihub.infrastructure.storage.models import HistoryEntry
from apihub.infrastructure.storage.repositories.base import BaseRepository

DEFAULT_HISTORY_LIMIT = 200


class HistoryRepository(BaseRepository[HistoryEntry]):
    """Bounded, newest-first record of executed calls."""

    def __init__(self, backend: DocumentBackend, limit: int = DEFAULT_HISTORY_LIMIT):
        super().__init__(backend)
        self.limit = limit

    def document_name(self) -> str:
        return "history"

    def from_dict(self, data: Dict[str, Any]) -> HistoryEntry:
        return HistoryEntry.from_dict(data)

    def to_dict(self, item: HistoryEntry) -> Dict[str, Any]:
        return item.to_dict()

    async def load(self) -> None:
        await super().load()
        async with self._lock:
            del self._items[self.limit:]

    async def prepend(self, entry: HistoryEntry) -> None:
        """Insert at the front, evicting the oldest entries beyond the cap."""
        async with self._lock:
            self._items.insert(0, entry)
            del self._items[self.limit:]
            await self._save_locked()

    def query(self, connection_id: Optional[str] = None, limit: int = 50) -> List[HistoryEntry]:
        """Newest-first entries, optionally for one connection."""
        entries = self._items
        if connection_id:
            entries = [e for e in entries if e.connection_id == connection_id]
        return list(entries[:max(0, limit)])

    async def clear(self) -> None:
        async with self._lock:
            self._items = []
            await self._save_locked()
