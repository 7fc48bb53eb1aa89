"""Shared fixtures for API hub tests."""

from typing import Callable, List

import httpx
import pytest

from apihub.core.events import EventBus
from apihub.core.execution import RequestExecutor
from apihub.core.scheduling import Scheduler
from apihub.infrastructure.storage import (
    Capability,
    ConnectionProfile,
    ConnectionRepository,
    HistoryRepository,
    MemoryBackend,
    ScheduleRepository,
)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)


def make_profile(**overrides) -> ConnectionProfile:
    values = dict(
        id="conn-1",
        name="Example",
        base_url="https://api.example.com",
        color="#123456",
        capabilities=[
            Capability(id="get-user", method="GET", endpoint="/users/{{user_id}}"),
            Capability(
                id="create-item",
                method="POST",
                endpoint="/items",
                body_template={"count": "{{n}}", "label": "id-{{n}}"},
            ),
        ],
    )
    values.update(overrides)
    return ConnectionProfile(**values)


class Hub:
    """Executor and scheduler wired to in-memory storage and a fake upstream."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.backend = MemoryBackend()
        self.events = EventBus()
        self.published: List[tuple] = []
        self.events.add_listener(lambda topic, payload: self.published.append((topic, payload)))
        self.connections = ConnectionRepository(self.backend)
        self.history = HistoryRepository(self.backend)
        self.schedules = ScheduleRepository(self.backend)
        self.transport = RecordingTransport(handler)
        self.client = httpx.AsyncClient(transport=self.transport)
        self.executor = RequestExecutor(
            self.connections, self.history, self.events, http_client=self.client
        )
        self.scheduler = Scheduler(self.executor, self.connections, self.schedules, self.events)

    @property
    def topics(self) -> List[str]:
        return [topic for topic, _ in self.published]


def ok_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"ok": True})


@pytest.fixture
def hub_factory():
    """Build a Hub around a request handler."""
    return Hub


@pytest.fixture
def hub():
    return Hub(ok_handler)


@pytest.fixture
def profile_factory():
    """Build ConnectionProfile objects with sensible defaults."""
    return make_profile
