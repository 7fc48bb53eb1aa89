"""Catalog of connection templates for the API hub.

The catalog is a read-only JSON array loaded from disk on each access so edits
to the file show up without a restart.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from apihub.config import config
from apihub.core.logging import logger


class Catalog:
    """Read-only list of connection templates."""

    def __init__(self, path: Optional[Path] = None, entries: Optional[List[Dict[str, Any]]] = None):
        self.path = Path(path) if path else config.catalog_file()
        self._entries = entries

    def list(self) -> List[Dict[str, Any]]:
        if self._entries is not None:
            return list(self._entries)
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("catalog_load_failed", path=str(self.path), error=str(e))
            return []

    def get(self, catalog_id: str) -> Optional[Dict[str, Any]]:
        for entry in self.list():
            if entry.get("id") == catalog_id:
                return entry
        return None
