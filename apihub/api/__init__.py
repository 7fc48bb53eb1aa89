"""HTTP API for the API hub."""

from apihub.api.app import create_app

__all__ = ["create_app"]
