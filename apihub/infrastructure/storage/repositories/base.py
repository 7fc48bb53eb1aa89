"""Base repository for the API hub.

Implements Repository pattern with Dependency Inversion principle.
Repositories hold their collection in memory and persist the whole document
through an injected DocumentBackend after every mutation.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from apihub.core.logging import logger
from apihub.infrastructure.storage.backends import DocumentBackend

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """Abstract base repository for a list-shaped document.

    Mutations happen under the repository lock. The lock only guards
    bookkeeping, never outbound calls.
    """

    def __init__(self, backend: DocumentBackend):
        self.backend = backend
        self._items: List[T] = []
        self._lock = asyncio.Lock()

    @abstractmethod
    def document_name(self) -> str:
        """Return the document name this repository manages."""
        pass

    @abstractmethod
    def from_dict(self, data: Dict[str, Any]) -> T:
        pass

    @abstractmethod
    def to_dict(self, item: T) -> Dict[str, Any]:
        pass

    async def load(self) -> None:
        """Replace the in-memory collection with the persisted document."""
        raw = await asyncio.to_thread(self.backend.load, self.document_name(), [])
        items = []
        for row in raw or []:
            try:
                items.append(self.from_dict(row))
            except (TypeError, ValueError) as e:
                logger.warning("storage_row_skipped", document=self.document_name(), error=str(e))
        async with self._lock:
            self._items = items
        logger.info("repository_loaded", document=self.document_name(), count=len(items))

    async def persist(self) -> None:
        """Write the current collection to the backend."""
        async with self._lock:
            await self._save_locked()

    async def _save_locked(self) -> None:
        document = [self.to_dict(item) for item in self._items]
        await asyncio.to_thread(self.backend.save, self.document_name(), document)

    async def update(self, item_id: str, apply: Callable[[T], T]) -> Optional[T]:
        """Swap an item for apply(current item), all under the lock.

        apply sees the stored item as it is once the lock is held, so counters
        bumped by bookkeeping queued ahead of the update are carried over.
        Exceptions raised by apply leave the collection untouched. Returns
        None if no item has this id.
        """
        async with self._lock:
            for index, existing in enumerate(self._items):
                if existing.id == item_id:
                    updated = apply(existing)
                    self._items[index] = updated
                    await self._save_locked()
                    return updated
        return None

    def list_all(self) -> List[T]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)
