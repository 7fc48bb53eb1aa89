"""Scheduled job routes for the API hub."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from apihub.api.dependencies import get_services
from apihub.core import registry
from apihub.core.errors import ConfigurationError
from apihub.core.events import SCHEDULE_ADDED, SCHEDULE_DELETED, SCHEDULE_UPDATED
from apihub.models import ScheduleCreateRequest, ScheduleUpdateRequest
from apihub.services import HubServices

router = APIRouter(tags=["Schedules"])


@router.get("/schedules")
async def list_schedules(services: HubServices = Depends(get_services)):
    """List all recurring jobs."""
    jobs = services.schedules.list_all()
    return {"success": True, "data": [j.to_dict() for j in jobs], "count": len(jobs)}


@router.post("/schedules", status_code=201)
async def create_schedule(
    schedule_data: ScheduleCreateRequest,
    services: HubServices = Depends(get_services),
):
    """Create a recurring job.

    - **connection_id** / **capability_id**: The operation to run
    - **params**: Values for the capability's placeholders
    - **interval_min**: Minutes between runs (minimum 1); the first run is one interval from now
    """
    try:
        job = registry.build_schedule(schedule_data.model_dump())
    except ConfigurationError as e:
        return JSONResponse(status_code=400, content={"success": False, "error": str(e)})

    await services.schedules.add(job)
    services.events.publish(SCHEDULE_ADDED, job.to_dict())
    return {"success": True, "data": job.to_dict()}


@router.put("/schedules/{schedule_id}")
async def update_schedule(
    schedule_id: str,
    changes: ScheduleUpdateRequest,
    services: HubServices = Depends(get_services),
):
    """Update a recurring job. Enable or disable it with **enabled**."""
    fields = changes.model_dump(exclude_unset=True)
    updated = await services.schedules.update(
        schedule_id, lambda job: registry.update_schedule(job, fields)
    )
    if updated is None:
        return JSONResponse(status_code=404, content={"success": False, "error": "Not found"})
    services.events.publish(SCHEDULE_UPDATED, updated.to_dict())
    return {"success": True, "data": updated.to_dict()}


@router.delete("/schedules/{schedule_id}")
async def delete_schedule(schedule_id: str, services: HubServices = Depends(get_services)):
    """Delete a recurring job."""
    removed = await services.schedules.delete(schedule_id)
    if removed:
        services.events.publish(SCHEDULE_DELETED, {"id": schedule_id})
    return {"success": True, "deleted": removed}


@router.post("/schedules/{schedule_id}/run")
async def run_schedule_now(schedule_id: str, services: HubServices = Depends(get_services)):
    """Fire a job immediately with the same bookkeeping as a scheduled run."""
    job = services.schedules.get_by_id(schedule_id)
    if job is None:
        return JSONResponse(status_code=404, content={"success": False, "error": "Not found"})

    entry = await services.scheduler.run_job(job)
    if entry is None:
        return JSONResponse(
            status_code=409,
            content={"success": False, "error": "Connection or capability no longer exists"},
        )
    return {"success": True, "data": entry.to_dict()}
