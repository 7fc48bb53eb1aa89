"""Live update routes for the API hub."""

import asyncio

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from apihub.api.dependencies import get_services
from apihub.api.utils import KEEPALIVE_FRAME, create_sse_event
from apihub.core.logging import logger
from apihub.services import HubServices

router = APIRouter(tags=["Events"])

KEEPALIVE_SECONDS = 15.0


@router.get("/events")
async def stream_events(request: Request, services: HubServices = Depends(get_services)):
    """Server-Sent Events stream of hub notifications.

    Each event is `data: {"type": <topic>, ...payload}`. Events published while
    a client is disconnected are not replayed.
    """
    queue = services.events.subscribe()
    logger.info("event_stream_opened", subscribers=services.events.subscriber_count)

    async def event_generator():
        try:
            yield create_sse_event("connected", {"subscribers": services.events.subscriber_count})
            while not await request.is_disconnected():
                try:
                    topic, payload = await asyncio.wait_for(queue.get(), KEEPALIVE_SECONDS)
                except asyncio.TimeoutError:
                    yield KEEPALIVE_FRAME
                    continue
                yield create_sse_event(topic, payload)
        finally:
            services.events.unsubscribe(queue)
            logger.info("event_stream_closed", subscribers=services.events.subscriber_count)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
