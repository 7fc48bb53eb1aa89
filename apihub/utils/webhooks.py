"""Webhook utilities for the API hub.

Sends webhook notifications for scheduled runs and failed requests.
"""

from typing import Any, Dict

import requests

from apihub.core.logging import logger


def fire_webhook(webhook_url: str, payload: Dict[str, Any]) -> bool:
    """POST an event payload to a webhook.

    Args:
        webhook_url: URL to POST the event to (n8n, Zapier, Make, etc.)
        payload: Event data, including its "type"

    Returns:
        True if webhook fired successfully, False otherwise

    Example:
        >>> payload = {"type": "schedule:ran", "id": "123", "result": {"status": 200}}
        >>> success = fire_webhook("https://hooks.zapier.com/...", payload)
    """
    try:
        response = requests.post(
            webhook_url,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=10,
        )
        response.raise_for_status()

        logger.info(
            "webhook_fired_successfully",
            webhook_url=webhook_url[:50] + "...",
            event=payload.get("type"),
            status_code=response.status_code,
        )
        return True

    except requests.exceptions.RequestException as e:
        logger.warning(
            "webhook_failed",
            webhook_url=webhook_url[:50] + "...",
            event=payload.get("type"),
            error=str(e),
        )
        return False
