"""Unit tests for Scheduler."""

import asyncio
import json
from datetime import timedelta

import httpx
import pytest

from apihub.infrastructure.storage import ScheduledJob
from apihub.utils.scheduling import utc_now


def make_job(**overrides) -> ScheduledJob:
    now = utc_now()
    values = dict(
        id="job-1",
        connection_id="conn-1",
        capability_id="get-user",
        params={"user_id": 42, "fields": "name"},
        interval_min=1,
        next_run=now - timedelta(minutes=2),
        created=now - timedelta(minutes=3),
    )
    values.update(overrides)
    return ScheduledJob(**values)


class TestTick:
    """Test due-job detection and dispatch."""

    @pytest.mark.asyncio
    async def test_overdue_job_runs_and_reschedules(self, hub, profile_factory):
        """Test an overdue job fires once and next_run moves to now + interval."""
        await hub.connections.add(profile_factory())
        await hub.schedules.add(make_job())

        tasks = await hub.scheduler.tick()
        await asyncio.gather(*tasks)

        job = hub.schedules.get_by_id("job-1")
        assert len(tasks) == 1
        assert job.run_count == 1
        assert job.last_result["status"] == 200
        assert abs((job.next_run - (utc_now() + timedelta(minutes=1))).total_seconds()) < 5
        assert job.next_run - job.last_run == timedelta(minutes=1)

        sent = hub.transport.requests[0]
        assert sent.url.path == "/users/42"
        assert sent.url.params["fields"] == "name"
        assert "schedule:ran" in hub.topics

    @pytest.mark.asyncio
    async def test_failing_job_still_advances(self, hub_factory, profile_factory):
        """Test a transport failure is recorded and the job keeps its cadence."""

        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        hub = hub_factory(refuse)
        await hub.connections.add(profile_factory())
        await hub.schedules.add(make_job())

        await asyncio.gather(*await hub.scheduler.tick())

        job = hub.schedules.get_by_id("job-1")
        assert job.run_count == 1
        assert job.last_result["status"] == 0
        assert job.next_run > utc_now()

    @pytest.mark.asyncio
    async def test_unencodable_auth_still_advances(self, hub, profile_factory):
        """Test a request that cannot be built is recorded and the job advances."""
        await hub.connections.add(
            profile_factory(auth_type="apikey", auth_param="X-Key", auth_value="clé")
        )
        await hub.schedules.add(make_job())

        await asyncio.gather(*await hub.scheduler.tick())

        job = hub.schedules.get_by_id("job-1")
        assert job.run_count == 1
        assert job.last_result["status"] == 0
        assert job.next_run > utc_now()
        assert await hub.scheduler.tick() == []

    @pytest.mark.asyncio
    async def test_disabled_and_future_jobs_are_not_due(self, hub, profile_factory):
        """Test only enabled jobs with next_run in the past are dispatched."""
        await hub.connections.add(profile_factory())
        await hub.schedules.add(make_job(id="disabled", enabled=False))
        await hub.schedules.add(make_job(id="future", next_run=utc_now() + timedelta(minutes=5)))

        assert await hub.scheduler.tick() == []
        assert hub.transport.requests == []

    @pytest.mark.asyncio
    async def test_one_failing_job_does_not_block_siblings(self, hub_factory, profile_factory):
        """Test per-job isolation within a tick."""

        def handler(request):
            if request.url.path == "/users/bad":
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200, json={})

        hub = hub_factory(handler)
        await hub.connections.add(profile_factory())
        await hub.schedules.add(make_job(id="bad", params={"user_id": "bad"}))
        await hub.schedules.add(make_job(id="good", params={"user_id": "good"}))

        await asyncio.gather(*await hub.scheduler.tick())

        assert hub.schedules.get_by_id("bad").last_result["status"] == 0
        assert hub.schedules.get_by_id("good").last_result["status"] == 200

    @pytest.mark.asyncio
    async def test_running_job_not_dispatched_twice(self, hub_factory, profile_factory):
        """Test a job still in flight is skipped by the next tick."""
        release = asyncio.Event()

        async def slow(request):
            await release.wait()
            return httpx.Response(200, json={})

        hub = hub_factory(slow)
        await hub.connections.add(profile_factory())
        await hub.schedules.add(make_job())

        first = await hub.scheduler.tick()
        await asyncio.sleep(0)
        second = await hub.scheduler.tick()
        release.set()
        await asyncio.gather(*first)

        assert len(first) == 1
        assert second == []
        assert hub.schedules.get_by_id("job-1").run_count == 1


class TestDanglingReferences:
    """Test jobs whose connection or capability is gone."""

    @pytest.mark.asyncio
    async def test_missing_connection_skips_silently(self, hub):
        """Test a dangling connection leaves the job untouched and enabled."""
        job = make_job()
        await hub.schedules.add(job)
        next_run = job.next_run

        await asyncio.gather(*await hub.scheduler.tick())

        stored = hub.schedules.get_by_id("job-1")
        assert stored.enabled is True
        assert stored.run_count == 0
        assert stored.next_run == next_run
        assert hub.history.query() == []

    @pytest.mark.asyncio
    async def test_missing_capability_skips_then_recovers(self, hub, profile_factory):
        """Test a job becomes dispatchable again once its capability reappears."""
        await hub.connections.add(profile_factory(capabilities=[]))
        await hub.schedules.add(make_job())

        await asyncio.gather(*await hub.scheduler.tick())
        assert hub.schedules.get_by_id("job-1").run_count == 0

        await hub.connections.update("conn-1", lambda stored: profile_factory())
        await asyncio.gather(*await hub.scheduler.tick())
        assert hub.schedules.get_by_id("job-1").run_count == 1


class TestRunJobBody:
    """Test body templating for non-GET capabilities."""

    @pytest.mark.asyncio
    async def test_post_body_keeps_native_types(self, hub, profile_factory):
        """Test whole-leaf placeholders keep the param type in the sent JSON."""
        await hub.connections.add(profile_factory())
        job = make_job(capability_id="create-item", params={"n": 5})
        await hub.schedules.add(job)

        entry = await hub.scheduler.run_job(job)

        assert entry.status == 200
        sent = hub.transport.requests[0]
        assert sent.method == "POST"
        assert json.loads(sent.content) == {"count": 5, "label": "id-{{n}}"}
        assert sent.url.query == b""
