"""Settings routes for the API hub."""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from apihub.api.dependencies import get_services
from apihub.core.events import SETTINGS_UPDATED
from apihub.services import HubServices

router = APIRouter(tags=["Settings"])


@router.get("/settings")
async def get_settings(services: HubServices = Depends(get_services)):
    return {"success": True, "data": services.settings.get()}


@router.put("/settings")
async def update_settings(
    changes: Dict[str, Any] = Body(...),
    services: HubServices = Depends(get_services),
):
    """Merge UI settings (e.g. accent_color)."""
    settings = await services.settings.update(changes)
    services.events.publish(SETTINGS_UPDATED, settings)
    return {"success": True, "data": settings}
