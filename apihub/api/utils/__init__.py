"""API utilities for the API hub."""

from apihub.api.utils.sse import KEEPALIVE_FRAME, create_sse_event

__all__ = ["KEEPALIVE_FRAME", "create_sse_event"]
