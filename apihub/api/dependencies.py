"""FastAPI dependencies for the API hub.

Dependency injection functions for route handlers.
"""

from fastapi import Request

from apihub.services import HubServices


def get_services(request: Request) -> HubServices:
    """Get the service container from app state.

    Set via create_app(services=...) or built from configuration at startup.
    """
    return request.app.state.services
