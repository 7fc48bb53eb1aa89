"""Event bus for the API hub.

Fire-and-forget notifications to live subscribers (SSE streams) and listener
callbacks (webhooks). Delivery is at most once and a slow, absent or failing
subscriber never affects the publisher.
"""

import asyncio
from typing import Any, Callable, Dict, List, Set, Tuple

from apihub.core.logging import logger
from apihub.utils.webhooks import fire_webhook

Event = Tuple[str, Dict[str, Any]]
Listener = Callable[[str, Dict[str, Any]], None]

CONNECTION_ADDED = "connection:added"
CONNECTION_UPDATED = "connection:updated"
CONNECTION_DELETED = "connection:deleted"
REQUEST_COMPLETE = "request:complete"
REQUEST_ERROR = "request:error"
SCHEDULE_ADDED = "schedule:added"
SCHEDULE_UPDATED = "schedule:updated"
SCHEDULE_DELETED = "schedule:deleted"
SCHEDULE_RAN = "schedule:ran"
HISTORY_CLEARED = "history:cleared"
SETTINGS_UPDATED = "settings:updated"


class EventBus:
    """Publishes (topic, payload) pairs to queues and callbacks."""

    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self._subscribers: Set[asyncio.Queue] = set()
        self._listeners: List[Listener] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        for queue in list(self._subscribers):
            try:
                queue.put_nowait((topic, payload))
            except asyncio.QueueFull:
                logger.warning("event_dropped", topic=topic, reason="subscriber queue full")

        for listener in list(self._listeners):
            try:
                listener(topic, payload)
            except Exception as e:
                logger.warning("event_listener_failed", topic=topic, error=str(e))


class WebhookNotifier:
    """Listener forwarding selected events to a webhook in a worker thread."""

    def __init__(self, webhook_url: str, topics: Tuple[str, ...] = (SCHEDULE_RAN, REQUEST_ERROR)):
        self.webhook_url = webhook_url
        self.topics = topics
        self._pending: Set[asyncio.Task] = set()

    def __call__(self, topic: str, payload: Dict[str, Any]) -> None:
        if topic not in self.topics:
            return
        task = asyncio.get_running_loop().create_task(
            asyncio.to_thread(fire_webhook, self.webhook_url, {"type": topic, **payload})
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
