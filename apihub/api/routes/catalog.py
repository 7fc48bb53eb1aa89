"""Catalog routes for the API hub."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from apihub.api.dependencies import get_services
from apihub.services import HubServices

router = APIRouter(tags=["Catalog"])


@router.get("/catalog")
async def list_catalog(services: HubServices = Depends(get_services)):
    """List connection templates available for one-step registration."""
    entries = services.catalog.list()
    return {"success": True, "data": entries, "count": len(entries)}


@router.get("/catalog/{catalog_id}")
async def get_catalog_entry(catalog_id: str, services: HubServices = Depends(get_services)):
    """Get a single connection template."""
    entry = services.catalog.get(catalog_id)
    if entry is None:
        return JSONResponse(status_code=404, content={"success": False, "error": "Not found"})
    return {"success": True, "data": entry}
