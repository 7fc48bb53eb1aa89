"""Request execution routes for the API hub."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from apihub.api.dependencies import get_services
from apihub.core.errors import ConnectionNotFound
from apihub.models import ExecuteRequest
from apihub.services import HubServices

router = APIRouter(tags=["Requests"])


@router.post("/request")
async def execute_request(request: ExecuteRequest, services: HubServices = Depends(get_services)):
    """Execute one request through a connection profile.

    Upstream errors and network failures still return 200 with the history
    entry; inspect **status** (0 means the call never got a response).
    """
    try:
        entry = await services.executor.execute(
            request.connection_id,
            method=request.method,
            endpoint=request.endpoint,
            body=request.body,
            query_params=request.query_params,
            path_params=request.path_params,
            custom_headers=request.custom_headers,
        )
    except ConnectionNotFound as e:
        return JSONResponse(status_code=404, content={"success": False, "error": str(e)})

    return {"success": True, "data": entry.to_dict()}
