"""Persistence backends for the API hub.

Each persisted collection is a single JSON document that is fully rewritten on
every save. There is no incremental format and the last writer wins.
"""

import copy
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from supabase import Client, create_client

from apihub.config import config
from apihub.core.errors import StorageError
from apihub.core.logging import logger


class DocumentBackend(ABC):
    """Loads and saves named JSON documents."""

    @abstractmethod
    def load(self, name: str, default: Any) -> Any:
        """Return the stored document, or default if it does not exist."""

    @abstractmethod
    def save(self, name: str, document: Any) -> None:
        """Replace the stored document."""

    def describe(self) -> Dict[str, Any]:
        """Short description used by the health endpoint."""
        return {"backend": type(self).__name__}


class FileBackend(DocumentBackend):
    """One pretty-printed <name>.json file per document."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def load(self, name: str, default: Any) -> Any:
        path = self._path(name)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return default
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("storage_load_failed", document=name, path=str(path), error=str(e))
            return default

    def save(self, name: str, document: Any) -> None:
        path = self._path(name)
        try:
            path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

    def describe(self) -> Dict[str, Any]:
        return {"backend": "file", "data_dir": str(self.data_dir)}


class MemoryBackend(DocumentBackend):
    """Keeps deep copies of documents in a dict. Used for tests and ephemeral runs."""

    def __init__(self, documents: Optional[Dict[str, Any]] = None):
        self.documents: Dict[str, Any] = copy.deepcopy(documents or {})
        self.saves: Dict[str, int] = {}

    def load(self, name: str, default: Any) -> Any:
        if name not in self.documents:
            return default
        return copy.deepcopy(self.documents[name])

    def save(self, name: str, document: Any) -> None:
        self.documents[name] = copy.deepcopy(document)
        self.saves[name] = self.saves.get(name, 0) + 1

    def describe(self) -> Dict[str, Any]:
        return {"backend": "memory", "documents": sorted(self.documents)}


class SupabaseBackend(DocumentBackend):
    """One row per document in a Supabase table with columns name (pk) and data (jsonb).

    The client is created lazily so the backend can be built before
    credentials are checked.
    """

    def __init__(self, table: Optional[str] = None, client: Optional[Client] = None):
        self.table = table or config.supabase_table()
        self._client = client

    @property
    def db(self) -> Client:
        if self._client is None:
            url = config.supabase_url()
            key = config.supabase_service_role_key()
            if not url or not key:
                raise StorageError(
                    "Supabase not configured. Set SUPABASE_URL and "
                    "SUPABASE_SERVICE_ROLE_KEY environment variables."
                )
            self._client = create_client(url, key)
            logger.info("supabase_client_initialized", url=url, table=self.table)
        return self._client

    def load(self, name: str, default: Any) -> Any:
        try:
            result = self.db.table(self.table).select("data").eq("name", name).execute()
        except Exception as e:
            raise StorageError(f"Failed to load document '{name}': {e}") from e

        if not result.data:
            return default
        return result.data[0]["data"]

    def save(self, name: str, document: Any) -> None:
        try:
            self.db.table(self.table).upsert({"name": name, "data": document}).execute()
        except Exception as e:
            raise StorageError(f"Failed to save document '{name}': {e}") from e

    def describe(self) -> Dict[str, Any]:
        return {"backend": "supabase", "table": self.table}


def create_backend(kind: Optional[str] = None) -> DocumentBackend:
    """Build the backend selected by HUB_STORAGE_BACKEND."""
    kind = (kind or config.storage_backend()).lower()
    if kind == "file":
        return FileBackend(config.data_dir())
    if kind == "memory":
        return MemoryBackend()
    if kind == "supabase":
        return SupabaseBackend()
    raise StorageError(f"Unknown storage backend: {kind}. Must be 'file', 'memory' or 'supabase'")
