"""Configuration management for the API hub.

Centralizes all environment variable access for better testability and maintainability.
"""

import os
from pathlib import Path
from typing import Optional

_PACKAGE_DIR = Path(__file__).resolve().parent


class Config:
    """Application configuration loaded from environment variables."""

    # Storage
    @staticmethod
    def data_dir() -> Path:
        """Directory holding the persisted JSON documents."""
        return Path(os.environ.get("HUB_DATA_DIR", "data"))

    @staticmethod
    def catalog_file() -> Path:
        """Catalog of connection templates (read-only JSON array)."""
        path = os.environ.get("HUB_CATALOG_FILE")
        return Path(path) if path else _PACKAGE_DIR / "data" / "catalog.json"

    @staticmethod
    def storage_backend() -> str:
        """Persistence backend: 'file', 'memory' or 'supabase'."""
        return os.environ.get("HUB_STORAGE_BACKEND", "file").lower()

    # Supabase configuration
    @staticmethod
    def supabase_url() -> Optional[str]:
        """Get Supabase project URL from environment."""
        return os.environ.get("SUPABASE_URL")

    @staticmethod
    def supabase_service_role_key() -> Optional[str]:
        """Get Supabase service role key from environment."""
        return os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

    @staticmethod
    def supabase_table() -> str:
        """Table storing one row per persisted document."""
        return os.environ.get("HUB_SUPABASE_TABLE", "hub_documents")

    # Execution
    @staticmethod
    def scheduler_tick_seconds() -> float:
        """Period of the scheduler timer."""
        return float(os.environ.get("HUB_SCHEDULER_TICK_SECONDS", "15"))

    @staticmethod
    def history_limit() -> int:
        """Maximum number of history entries retained."""
        return int(os.environ.get("HUB_HISTORY_LIMIT", "200"))

    @staticmethod
    def request_timeout() -> Optional[float]:
        """Outbound request timeout in seconds. None disables the timeout."""
        value = os.environ.get("HUB_REQUEST_TIMEOUT")
        return float(value) if value else None

    @staticmethod
    def webhook_url() -> Optional[str]:
        """Optional URL notified of scheduled runs and request failures."""
        return os.environ.get("HUB_WEBHOOK_URL")

    # Server
    @staticmethod
    def host() -> str:
        return os.environ.get("HUB_HOST", "0.0.0.0")

    @staticmethod
    def port() -> int:
        return int(os.environ.get("PORT", "4800"))

    @staticmethod
    def log_level() -> str:
        return os.environ.get("HUB_LOG_LEVEL", "INFO").upper()

    # Helper methods
    @staticmethod
    def is_configured() -> bool:
        """Check if all required configuration is present."""
        return not Config.get_missing_config()

    @staticmethod
    def get_missing_config() -> list[str]:
        """Get list of missing required configuration keys."""
        missing = []
        if Config.storage_backend() == "supabase":
            if not Config.supabase_url():
                missing.append("SUPABASE_URL")
            if not Config.supabase_service_role_key():
                missing.append("SUPABASE_SERVICE_ROLE_KEY")
        return missing


# Singleton instance for easy access
config = Config()
