"""Settings repository for the API hub.

Settings are a single JSON object rather than a list of records.
"""

import asyncio
from typing import Any, Dict

from apihub.infrastructure.storage.backends import DocumentBackend

DEFAULT_SETTINGS: Dict[str, Any] = {"accent_color": "#6366f1"}


class SettingsRepository:
    """Free-form UI settings merged over defaults."""

    def __init__(self, backend: DocumentBackend):
        self.backend = backend
        self._settings: Dict[str, Any] = dict(DEFAULT_SETTINGS)
        self._lock = asyncio.Lock()

    def document_name(self) -> str:
        return "settings"

    async def load(self) -> None:
        stored = await asyncio.to_thread(self.backend.load, self.document_name(), {})
        async with self._lock:
            self._settings = {**DEFAULT_SETTINGS, **(stored or {})}

    def get(self) -> Dict[str, Any]:
        return dict(self._settings)

    async def update(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        async with self._lock:
            self._settings.update(changes)
            await asyncio.to_thread(self.backend.save, self.document_name(), dict(self._settings))
            return dict(self._settings)
