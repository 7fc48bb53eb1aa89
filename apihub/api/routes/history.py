"""History routes for the API hub."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from apihub.api.dependencies import get_services
from apihub.core.events import HISTORY_CLEARED
from apihub.services import HubServices

router = APIRouter(tags=["History"])


@router.get("/history")
async def list_history(
    connection_id: Optional[str] = None,
    limit: int = Query(50, ge=0),
    services: HubServices = Depends(get_services),
):
    """Newest-first executed requests, optionally for one connection."""
    entries = services.history.query(connection_id=connection_id, limit=limit)
    return {"success": True, "data": [e.to_dict() for e in entries], "count": len(entries)}


@router.delete("/history")
async def clear_history(services: HubServices = Depends(get_services)):
    """Remove every history entry."""
    await services.history.clear()
    services.events.publish(HISTORY_CLEARED, {})
    return {"success": True}
