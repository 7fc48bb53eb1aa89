"""Scheduler for the API hub.

Timer-driven loop that fires due recurring jobs through the request executor.
"""

import asyncio
from datetime import datetime
from typing import List, Optional, Set

from apihub.core.errors import ConnectionNotFound
from apihub.core.events import SCHEDULE_RAN, EventBus
from apihub.core.execution import RequestExecutor, TemplateFiller, classify
from apihub.core.logging import logger
from apihub.infrastructure.storage.models import HistoryEntry, ScheduledJob
from apihub.infrastructure.storage.repositories import ConnectionRepository, ScheduleRepository
from apihub.utils.scheduling import utc_now

DEFAULT_TICK_SECONDS = 15.0


class Scheduler:
    """Dispatches due jobs on a fixed tick.

    Per job: Disabled -> (enabled, next_run <= now) Due -> Running -> Idle.
    Each due job runs in its own task so a slow or failing job never delays
    its siblings or the next tick. Jobs still running are not dispatched again.
    """

    def __init__(
        self,
        executor: RequestExecutor,
        connections: ConnectionRepository,
        schedules: ScheduleRepository,
        events: Optional[EventBus] = None,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
    ):
        self.executor = executor
        self.connections = connections
        self.schedules = schedules
        self.events = events or executor.events
        self.tick_seconds = tick_seconds
        self._running: Set[str] = set()
        self._tasks: Set[asyncio.Task] = set()
        self._loop_task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def start(self) -> None:
        """Start the background timer on the running event loop."""
        if self.is_running:
            return
        self._loop_task = asyncio.get_running_loop().create_task(self._loop())
        logger.info("scheduler_started", tick_seconds=self.tick_seconds)

    async def stop(self) -> None:
        """Stop the timer. In-flight jobs are cancelled."""
        tasks = list(self._tasks)
        if self._loop_task is not None:
            tasks.append(self._loop_task)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._loop_task = None
        logger.info("scheduler_stopped")

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.tick_seconds)
            try:
                await self.tick()
            except Exception as e:
                logger.error("scheduler_tick_failed", error=str(e))

    async def tick(self, now: Optional[datetime] = None) -> List[asyncio.Task]:
        """Dispatch every enabled job whose next_run has passed.

        Returns the dispatched tasks without waiting for them.
        """
        now = now or utc_now()
        dispatched = []
        for job in self.schedules.due(now):
            if job.id in self._running:
                logger.debug("scheduled_job_still_running", schedule_id=job.id)
                continue
            self._running.add(job.id)
            task = asyncio.get_running_loop().create_task(self._run_isolated(job))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            dispatched.append(task)

        if dispatched:
            logger.info("scheduler_tick", dispatched=len(dispatched))
        return dispatched

    async def _run_isolated(self, job: ScheduledJob) -> Optional[HistoryEntry]:
        try:
            return await self.run_job(job)
        except Exception as e:
            logger.error("scheduled_job_failed", schedule_id=job.id, error=str(e))
            return None
        finally:
            self._running.discard(job.id)

    async def run_job(self, job: ScheduledJob) -> Optional[HistoryEntry]:
        """Fire one job and advance its schedule.

        Dangling connection or capability references skip the job for now and
        leave it untouched. Returns the history entry, or None when skipped.
        """
        profile = self.connections.get_by_id(job.connection_id)
        if profile is None:
            logger.info("scheduled_job_skipped", schedule_id=job.id, reason="connection not found")
            return None
        capability = profile.find_capability(job.capability_id)
        if capability is None:
            logger.info("scheduled_job_skipped", schedule_id=job.id, reason="capability not found")
            return None

        placement = TemplateFiller.place_params(capability, job.params)
        if placement.dropped:
            logger.debug("scheduled_params_unused", schedule_id=job.id, params=placement.dropped)

        try:
            entry = await self.executor.execute(
                profile.id,
                method=capability.method,
                endpoint=capability.endpoint,
                body=placement.body,
                query_params=placement.query_params,
                path_params=placement.path_params,
            )
        except ConnectionNotFound:
            logger.info("scheduled_job_skipped", schedule_id=job.id, reason="connection deleted")
            return None

        result = entry.summary()
        updated = await self.schedules.record_run(job.id, result, utc_now())
        if updated is None:
            logger.info("scheduled_job_deleted_while_running", schedule_id=job.id)
            return entry

        logger.info(
            "scheduled_job_ran",
            schedule_id=job.id,
            status=entry.status,
            outcome=classify(entry).value,
            run_count=updated.run_count,
        )
        self.events.publish(SCHEDULE_RAN, {"id": job.id, "result": result})
        return entry
