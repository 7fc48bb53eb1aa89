"""Pydantic models for the API hub.

All models are organized by domain:
- connections: Connection profile registration and updates
- requests: Ad-hoc request execution
- schedules: Recurring jobs
"""

from apihub.models.connections import (
    CapabilityModel,
    ConnectionCreateRequest,
    ConnectionUpdateRequest,
)
from apihub.models.requests import ExecuteRequest
from apihub.models.schedules import ScheduleCreateRequest, ScheduleUpdateRequest

__all__ = [
    "CapabilityModel",
    "ConnectionCreateRequest",
    "ConnectionUpdateRequest",
    "ExecuteRequest",
    "ScheduleCreateRequest",
    "ScheduleUpdateRequest",
]
