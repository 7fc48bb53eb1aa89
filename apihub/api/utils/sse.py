"""SSE (Server-Sent Events) framing for the hub event stream."""

import json
from typing import Any, Dict

KEEPALIVE_FRAME = ": keepalive\n\n"


def create_sse_event(topic: str, payload: Dict[str, Any]) -> str:
    """Frame a bus event as a single `data:` line.

    The topic is carried inside the JSON object under "type" so browser
    clients can use a single onmessage handler. Non-JSON values such as
    datetimes are stringified.
    """
    body = json.dumps({"type": topic, **payload}, default=str)
    return f"data: {body}\n\n"
