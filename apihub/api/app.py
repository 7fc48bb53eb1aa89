"""FastAPI application factory for the API hub."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from apihub import __version__
from apihub.api.middleware import request_id_middleware
from apihub.api.routes import (
    catalog,
    connections,
    events,
    history,
    requests,
    schedules,
    settings,
    system,
)
from apihub.services import HubServices


def create_app(services: Optional[HubServices] = None, run_scheduler: bool = True) -> FastAPI:
    """Create and configure FastAPI app. Factory pattern for testability."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "services", None) is None:
            app.state.services = HubServices()
        await app.state.services.start(run_scheduler=run_scheduler)
        try:
            yield
        finally:
            await app.state.services.stop()

    app = FastAPI(
        title="apihub",
        description=(
            "Register connection profiles for third-party HTTP APIs, execute "
            "authenticated requests against them, keep a bounded request history "
            "and run recurring jobs."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.services = services

    # Add middleware
    app.middleware("http")(request_id_middleware)

    # Register routes
    app.include_router(system.router)
    app.include_router(catalog.router)
    app.include_router(connections.router)
    app.include_router(requests.router)
    app.include_router(schedules.router)
    app.include_router(history.router)
    app.include_router(settings.router)
    app.include_router(events.router)

    return app
