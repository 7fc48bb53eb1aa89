"""System routes for the API hub."""

import asyncio
import platform
import socket
import time
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends

from apihub import __version__
from apihub.api.dependencies import get_services
from apihub.core.errors import StorageError
from apihub.services import HubServices

router = APIRouter(tags=["System"])


def format_uptime(seconds: float) -> str:
    """Render an uptime as '3h 12m' or '12m'."""
    hours, remainder = divmod(int(seconds), 3600)
    minutes = remainder // 60
    return f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"


async def test_storage_connection(services: HubServices) -> Dict[str, Any]:
    """Test storage backend reachability. Returns dict with status and details."""
    try:
        await asyncio.wait_for(
            asyncio.to_thread(services.backend.load, "settings", {}), timeout=2.0
        )
        return {"status": "healthy", **services.backend.describe()}
    except asyncio.TimeoutError:
        return {"status": "timeout", "error": "Request timed out after 2s"}
    except StorageError as e:
        return {"status": "unavailable", "error": str(e)[:100]}


@router.get("/health")
async def health_check(services: HubServices = Depends(get_services)):
    """Health check with storage backend testing."""
    storage_health = await test_storage_connection(services)
    return {
        "status": "healthy" if storage_health.get("status") == "healthy" else "degraded",
        "service": "apihub",
        "version": __version__,
        "scheduler_running": services.scheduler.is_running,
        "dependencies": {"storage": storage_health},
        "timestamp": datetime.now().isoformat() + "Z",
    }


@router.get("/status")
async def status(services: HubServices = Depends(get_services)):
    """Hub status: uptime, host and collection counts."""
    return {
        "uptime": format_uptime(time.time() - services.started_at),
        "hostname": socket.gethostname(),
        "platform": f"{platform.system()} {platform.release()}",
        "clients": services.events.subscriber_count,
        "connection_count": len(services.connections),
        "total_requests": len(services.history),
        "active_schedules": services.schedules.active_count(),
    }
