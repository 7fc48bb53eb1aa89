"""Middleware for the API hub."""

from apihub.api.middleware.request_id import request_id_middleware

__all__ = ["request_id_middleware"]
