"""Scheduled job repository for the API hub."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from apihub.core.logging import logger
from apihub.infrastructure.storage.models import ScheduledJob
from apihub.infrastructure.storage.repositories.base import BaseRepository
from apihub.utils.scheduling import calculate_next_run_at


class ScheduleRepository(BaseRepository[ScheduledJob]):
    """Recurring jobs read by the Scheduler."""

    def document_name(self) -> str:
        return "schedules"

    def from_dict(self, data: Dict[str, Any]) -> ScheduledJob:
        return ScheduledJob.from_dict(data)

    def to_dict(self, item: ScheduledJob) -> Dict[str, Any]:
        return item.to_dict()

    def get_by_id(self, schedule_id: str) -> Optional[ScheduledJob]:
        for job in self._items:
            if job.id == schedule_id:
                return job
        return None

    def due(self, now: datetime) -> List[ScheduledJob]:
        """Enabled jobs whose next_run has passed."""
        return [job for job in self._items if job.is_due(now)]

    def active_count(self) -> int:
        return sum(1 for job in self._items if job.enabled)

    async def add(self, job: ScheduledJob) -> ScheduledJob:
        async with self._lock:
            self._items.append(job)
            await self._save_locked()
        logger.info("schedule_added", schedule_id=job.id, interval_min=job.interval_min)
        return job

    async def delete(self, schedule_id: str) -> bool:
        async with self._lock:
            before = len(self._items)
            self._items = [j for j in self._items if j.id != schedule_id]
            removed = len(self._items) != before
            if removed:
                await self._save_locked()
        return removed

    async def record_run(
        self, schedule_id: str, result: Dict[str, Any], now: datetime
    ) -> Optional[ScheduledJob]:
        """Advance last_run/next_run and bump run_count after a dispatch.

        Returns None if the job was deleted while it was running.
        """
        async with self._lock:
            job = self.get_by_id(schedule_id)
            if job is None:
                return None
            job.last_run = now
            job.next_run = calculate_next_run_at(job.interval_min, now)
            job.run_count += 1
            job.last_result = result
            await self._save_locked()
            return job
