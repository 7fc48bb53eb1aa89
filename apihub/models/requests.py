"""Request execution Pydantic models for the API hub."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ExecuteRequest(BaseModel):
    """Request for POST /request - execute one call through a connection."""
    connection_id: str = Field(..., min_length=1)
    method: str = Field("GET", description="HTTP method")
    endpoint: str = Field("", description="Path relative to the connection's base URL")
    body: Optional[Any] = Field(None, description="String sent verbatim, anything else as JSON")
    query_params: Optional[Dict[str, Any]] = None
    path_params: Optional[Dict[str, Any]] = Field(
        None,
        description="Values for {{name}} placeholders in the endpoint"
    )
    custom_headers: Optional[Dict[str, str]] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "connection_id": "4f1c...",
                    "method": "GET",
                    "endpoint": "/repos/{{owner}}/{{repo}}",
                    "path_params": {"owner": "python", "repo": "cpython"}
                }
            ]
        }
    }
