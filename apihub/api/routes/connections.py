"""Connection profile routes for the API hub."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from apihub.api.dependencies import get_services
from apihub.core import registry
from apihub.core.errors import ConfigurationError
from apihub.core.events import CONNECTION_ADDED, CONNECTION_DELETED, CONNECTION_UPDATED
from apihub.core.logging import logger
from apihub.models import ConnectionCreateRequest, ConnectionUpdateRequest
from apihub.services import HubServices

router = APIRouter(tags=["Connections"])


@router.get("/connections")
async def list_connections(services: HubServices = Depends(get_services)):
    """List all connection profiles."""
    profiles = services.connections.list_all()
    return {"success": True, "data": [p.to_dict() for p in profiles], "count": len(profiles)}


@router.post("/connections", status_code=201)
async def create_connection(
    connection_data: ConnectionCreateRequest,
    services: HubServices = Depends(get_services),
):
    """Register a connection profile.

    - **catalog_id**: Instantiate a catalog template; only **auth_value** is personalised
    - **name** / **base_url**: Required when not using a catalog template
    """
    try:
        profile = registry.build_profile(
            connection_data.model_dump(exclude_none=True), services.catalog
        )
    except ConfigurationError as e:
        logger.warning("connection_create_rejected", error=str(e))
        return JSONResponse(status_code=400, content={"success": False, "error": str(e)})

    await services.connections.add(profile)
    services.events.publish(CONNECTION_ADDED, profile.to_dict())
    return {"success": True, "data": profile.to_dict()}


@router.put("/connections/{connection_id}")
async def update_connection(
    connection_id: str,
    changes: ConnectionUpdateRequest,
    services: HubServices = Depends(get_services),
):
    """Update fields of a connection profile. The id never changes."""
    fields = changes.model_dump(exclude_unset=True)
    try:
        updated = await services.connections.update(
            connection_id, lambda profile: registry.update_profile(profile, fields)
        )
    except ConfigurationError as e:
        return JSONResponse(status_code=400, content={"success": False, "error": str(e)})

    if updated is None:
        return JSONResponse(status_code=404, content={"success": False, "error": "Not found"})
    services.events.publish(CONNECTION_UPDATED, updated.to_dict())
    return {"success": True, "data": updated.to_dict()}


@router.delete("/connections/{connection_id}")
async def delete_connection(connection_id: str, services: HubServices = Depends(get_services)):
    """Delete a connection profile. History entries and jobs referencing it are kept."""
    removed = await services.connections.delete(connection_id)
    if removed:
        services.events.publish(CONNECTION_DELETED, {"id": connection_id})
    return {"success": True, "deleted": removed}
