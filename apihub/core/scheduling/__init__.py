"""Scheduling module for the API hub."""

from apihub.core.scheduling.scheduler import Scheduler

__all__ = ["Scheduler"]
