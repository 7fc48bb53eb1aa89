"""Scheduled job Pydantic models for the API hub."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ScheduleCreateRequest(BaseModel):
    """Request for POST /schedules - create a recurring job."""
    name: Optional[str] = None
    connection_id: str = Field(..., min_length=1)
    capability_id: str = Field(..., min_length=1)
    params: Dict[str, Any] = Field(default_factory=dict)
    interval_min: int = Field(..., description="Interval in minutes (values below 1 become 1)")
    enabled: bool = True

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Poll weather",
                    "connection_id": "4f1c...",
                    "capability_id": "current",
                    "params": {"q": "Berlin"},
                    "interval_min": 15
                }
            ]
        }
    }


class ScheduleUpdateRequest(BaseModel):
    """Request for PUT /schedules/{id} - partial update."""
    name: Optional[str] = None
    connection_id: Optional[str] = None
    capability_id: Optional[str] = None
    params: Optional[Dict[str, Any]] = None
    interval_min: Optional[int] = None
    enabled: Optional[bool] = None
