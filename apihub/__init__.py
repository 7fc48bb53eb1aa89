"""API connection hub: connection profiles, request execution and recurring jobs."""

__version__ = "1.0.0"
