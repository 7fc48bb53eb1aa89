"""Utility helpers for the API hub."""

from apihub.utils.scheduling import calculate_next_run_at, format_timestamp, parse_timestamp, utc_now
from apihub.utils.webhooks import fire_webhook

__all__ = [
    "calculate_next_run_at",
    "format_timestamp",
    "parse_timestamp",
    "utc_now",
    "fire_webhook",
]
