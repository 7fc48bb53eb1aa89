"""Connection-related Pydantic models for the API hub.

These models handle registering and updating connection profiles.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CapabilityModel(BaseModel):
    """A named, pre-templated operation on a connection."""
    id: str = Field(..., min_length=1)
    endpoint: str = Field(..., description="Path template, e.g. /repos/{{owner}}/{{repo}}")
    method: str = Field("GET", description="HTTP method")
    name: str = ""
    description: str = ""
    body_template: Optional[Any] = Field(
        None,
        description="JSON body with whole-value {{name}} placeholders"
    )


class ConnectionCreateRequest(BaseModel):
    """Request for POST /connections - from a catalog template or from scratch."""
    catalog_id: Optional[str] = Field(
        None,
        description="Catalog template to instantiate; only auth_value is then used"
    )
    name: Optional[str] = None
    base_url: Optional[str] = None
    auth_type: Optional[str] = Field(
        None,
        pattern="^(none|bearer|basic|apikey|custom)$"
    )
    auth_param: Optional[str] = None
    auth_in: Optional[str] = Field(None, pattern="^(header|query)$")
    auth_prefix: Optional[str] = None
    auth_value: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    description: Optional[str] = None
    capabilities: Optional[List[CapabilityModel]] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"catalog_id": "github", "auth_value": "ghp_xxx"},
                {
                    "name": "Internal API",
                    "base_url": "https://api.internal.example.com/",
                    "auth_type": "apikey",
                    "auth_param": "X-API-Key",
                    "auth_value": "secret"
                }
            ]
        }
    }


class ConnectionUpdateRequest(BaseModel):
    """Request for PUT /connections/{id} - partial update, id is immutable."""
    name: Optional[str] = None
    base_url: Optional[str] = None
    auth_type: Optional[str] = Field(None, pattern="^(none|bearer|basic|apikey|custom)$")
    auth_param: Optional[str] = None
    auth_in: Optional[str] = Field(None, pattern="^(header|query)$")
    auth_prefix: Optional[str] = None
    auth_value: Optional[str] = None
    extra_headers: Optional[Dict[str, str]] = None
    headers: Optional[Dict[str, str]] = None
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    category: Optional[str] = None
    capabilities: Optional[List[CapabilityModel]] = None
