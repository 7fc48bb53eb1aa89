"""Service wiring for the API hub.

Builds the repositories, event bus, executor and scheduler around one
persistence backend and manages their startup/shutdown lifecycle.
"""

import time
from typing import Optional

import httpx

from apihub.config import config
from apihub.core.events import EventBus, WebhookNotifier
from apihub.core.execution import RequestExecutor
from apihub.core.logging import logger
from apihub.core.scheduling import Scheduler
from apihub.infrastructure.catalog import Catalog
from apihub.infrastructure.storage import (
    ConnectionRepository,
    DocumentBackend,
    HistoryRepository,
    ScheduleRepository,
    SettingsRepository,
    create_backend,
)


class HubServices:
    """Container for everything the HTTP layer and the scheduler share."""

    def __init__(
        self,
        backend: Optional[DocumentBackend] = None,
        catalog: Optional[Catalog] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        tick_seconds: Optional[float] = None,
        history_limit: Optional[int] = None,
        webhook_url: Optional[str] = None,
    ):
        self.backend = backend or create_backend()
        self.catalog = catalog or Catalog()
        self.events = EventBus()
        self.connections = ConnectionRepository(self.backend)
        self.history = HistoryRepository(self.backend, limit=history_limit or config.history_limit())
        self.schedules = ScheduleRepository(self.backend)
        self.settings = SettingsRepository(self.backend)
        self.executor = RequestExecutor(
            self.connections,
            self.history,
            self.events,
            http_client=http_client,
            timeout=config.request_timeout(),
        )
        self.scheduler = Scheduler(
            self.executor,
            self.connections,
            self.schedules,
            self.events,
            tick_seconds=tick_seconds or config.scheduler_tick_seconds(),
        )
        webhook_url = webhook_url or config.webhook_url()
        if webhook_url:
            self.events.add_listener(WebhookNotifier(webhook_url))
        self.started_at = time.time()

    async def load(self) -> None:
        """Load every repository from the backend."""
        await self.connections.load()
        await self.history.load()
        await self.schedules.load()
        await self.settings.load()

    async def start(self, run_scheduler: bool = True) -> None:
        await self.load()
        if run_scheduler:
            self.scheduler.start()
        logger.info("hub_started", storage=self.backend.describe())

    async def stop(self) -> None:
        await self.scheduler.stop()
        await self.executor.aclose()
        logger.info("hub_stopped")
